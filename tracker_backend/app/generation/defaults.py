"""Deterministic default configuration for trackers created without model generation."""

from __future__ import annotations

from tracker_backend.app.schemas import GeneratedTrackerConfig, LocationOption

DEFAULT_EMPTY_STATE_BULLETS = [
    "Track levels and patterns",
    "Identify trends over time",
    "Keep a personal record",
]
DEFAULT_LOCATIONS = [
    ("general", "General"),
    ("mild", "Mild"),
    ("moderate", "Moderate"),
    ("severe", "Severe"),
]
DEFAULT_TRIGGERS = ["Stress", "Weather", "Diet", "Sleep", "Activity", "Medication", "Other"]
DEFAULT_HASHTAGS = ["tracking", "health", "wellness", "log"]


def get_generic_config(name: str) -> GeneratedTrackerConfig:
    name = " ".join((name or "").split()) or "Tracker"
    lower = name.lower()
    return GeneratedTrackerConfig(
        intensity_label="Level",
        intensity_min_label="1 - Low",
        intensity_max_label="10 - High",
        intensity_scale="neutral",
        location_label="Category",
        location_placeholder="Select a category",
        triggers_label="Tags",
        notes_label="Notes",
        notes_placeholder="Add any notes or details...",
        add_button_label=f"Log {name}",
        form_title=f"Log {name}",
        empty_state_title=f"Welcome to {name}",
        empty_state_description=(
            f"Start tracking {lower} by logging your first entry. "
            "Understanding your patterns over time can provide valuable insights."
        ),
        empty_state_bullets=list(DEFAULT_EMPTY_STATE_BULLETS),
        entry_title=f"{name} Entry",
        delete_confirm_message=f"Are you sure you want to delete this {lower} entry? This action cannot be undone.",
        locations=[LocationOption(value=v, label=l) for v, l in DEFAULT_LOCATIONS],
        triggers=list(DEFAULT_TRIGGERS),
        suggested_hashtags=list(DEFAULT_HASHTAGS),
    )


__all__ = ["get_generic_config"]
