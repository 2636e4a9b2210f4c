"""Context lookups against mocked dictionary, Wikipedia and Datamuse endpoints."""

import asyncio

import httpx

from tracker_backend.app.context.dictionary import parse_dictionary_payload
from tracker_backend.app.context.gatherer import ContextGatherer, GatheredContext, sanitize_context
from tracker_backend.app.context.wikipedia import parse_categories

DICTIONARY_PAYLOAD = [
    {
        "word": "vertigo",
        "meanings": [
            {
                "partOfSpeech": "noun",
                "definitions": [
                    {"definition": "A sensation of whirling and loss of balance.", "example": "She had vertigo."},
                    {"definition": "A state of confusion."},
                ],
                "synonyms": ["dizziness", "giddiness"],
            }
        ],
    }
]
WIKI_SUMMARY = {"extract": "Vertigo is a condition where a person feels as if they are moving."}
WIKI_CATEGORIES = {
    "query": {
        "pages": {
            "123": {"categories": [{"title": "Category:Vestibular disorders"}, {"title": "Category:Symptoms"}]}
        }
    }
}
DATAMUSE = [{"word": "dizziness"}, {"word": "giddiness"}, {"word": "  "}]


def _router(overrides=None):
    overrides = overrides or {}
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        host = request.url.host
        calls.append(host)
        if host in overrides:
            return overrides[host](request)
        if host == "api.dictionaryapi.dev":
            return httpx.Response(200, json=DICTIONARY_PAYLOAD)
        if host == "en.wikipedia.org" and request.url.path.startswith("/api/rest_v1/page/summary"):
            return httpx.Response(200, json=WIKI_SUMMARY)
        if host == "en.wikipedia.org":
            assert request.url.params["prop"] == "categories"
            return httpx.Response(200, json=WIKI_CATEGORIES)
        if host == "api.datamuse.com":
            assert request.url.params["ml"] == "vertigo"
            return httpx.Response(200, json=DATAMUSE)
        return httpx.Response(404)

    return handler, calls


def _gather(handler, term="vertigo", supplied=None, enabled=True):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await ContextGatherer(enabled=enabled, client=client).gather(term, supplied)

    return asyncio.run(run())


def test_all_sources_fill_context():
    handler, _ = _router()
    ctx = _gather(handler)
    assert ctx.definition == "A sensation of whirling and loss of balance."
    assert ctx.all_definitions[0] == "(noun) A sensation of whirling and loss of balance."
    assert ctx.wiki_summary.startswith("Vertigo is a condition")
    assert ctx.wiki_categories == ["Vestibular disorders", "Symptoms"]
    assert ctx.related_terms == ["dizziness", "giddiness"]
    assert ctx.has_dictionary_hit


def test_supplied_context_wins_and_skips_lookups():
    handler, calls = _router()
    supplied = GatheredContext(
        all_definitions=["(noun) client definition"],
        wiki_summary="client summary",
        related_terms=["client"],
    )
    ctx = _gather(handler, supplied=supplied)
    assert ctx.all_definitions == ["(noun) client definition"]
    assert ctx.wiki_summary == "client summary"
    assert ctx.related_terms == ["client"]
    assert calls == []


def test_failing_source_is_dropped():
    def broken(request):
        raise httpx.ConnectError("down", request=request)

    handler, _ = _router({"api.dictionaryapi.dev": broken, "api.datamuse.com": lambda r: httpx.Response(500)})
    ctx = _gather(handler)
    assert not ctx.has_dictionary_hit
    assert ctx.related_terms == []
    assert ctx.wiki_summary is not None


def test_unknown_word_is_not_an_error():
    handler, _ = _router({"api.dictionaryapi.dev": lambda r: httpx.Response(404, json={"title": "No Definitions Found"})})
    assert _gather(handler).definition is None


def test_disabled_gatherer_returns_supplied_as_is():
    handler, calls = _router()
    ctx = _gather(handler, enabled=False)
    assert ctx == GatheredContext()
    assert calls == []


def test_sanitize_context_bounds_everything():
    ctx = sanitize_context(
        GatheredContext(
            definition='A "quoted" <definition>',
            all_definitions=["d"] * 9,
            wiki_summary="s" * 900,
            wiki_categories=["c"] * 9,
            related_terms=["{r}"] * 12 + [""],
        )
    )
    assert ctx.definition == "A quoted definition"
    assert len(ctx.all_definitions) == 5
    assert len(ctx.wiki_summary) == 500
    assert len(ctx.wiki_categories) == 6
    assert ctx.related_terms == ["r"] * 10


def test_parsers_tolerate_junk():
    assert parse_dictionary_payload({"title": "No Definitions Found"}) is None
    assert parse_dictionary_payload([{"word": "x", "meanings": "nope"}]).all_definitions == []
    assert parse_categories({"query": {}}) == []
    assert parse_categories("nope") == []
