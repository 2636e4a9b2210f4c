from .request_helpers import get_client_ip, get_request_scheme, get_user_agent, is_https_request
from .text import normalize_term, slugify

__all__ = [
    "get_client_ip",
    "get_request_scheme",
    "get_user_agent",
    "is_https_request",
    "normalize_term",
    "slugify",
]
