"""
Voltage-class styling for transmission line segments.

The FeatureServer reports VOLT_CLASS as a fixed set of labels; each maps to a
rank in 1..6 which drives stroke color and width.
"""

from __future__ import annotations

VOLTAGE_RANKS: dict[str, int] = {
    "UNDER 100": 1,
    "100-161": 2,
    "220-287": 3,
    "345": 4,
    "500": 5,
    "DC": 5,
    "735 AND ABOVE": 6,
}
DEFAULT_RANK = 1

VOLTAGE_COLORS: dict[int, str] = {
    1: "#6366f1",
    2: "#a855f7",
    3: "#22d3ee",
    4: "#4ade80",
    5: "#facc15",
    6: "#fb923c",
}
FALLBACK_COLOR = "#ffffff"

RANK_DOMAIN = (1, 6)
STROKE_WIDTH_RANGE = (0.4, 2.2)


def voltage_rank(voltage_class: object) -> int:
    # anything unlisted (missing, "NOT AVAILABLE", ...) is styled as the lowest class
    if not isinstance(voltage_class, str):
        return DEFAULT_RANK
    return VOLTAGE_RANKS.get(voltage_class, DEFAULT_RANK)


def stroke_width(rank: float) -> float:
    # linear, unclamped, like a d3 linear scale
    d0, d1 = RANK_DOMAIN
    r0, r1 = STROKE_WIDTH_RANGE
    return r0 + (rank - d0) * (r1 - r0) / (d1 - d0)


def stroke_color(rank: int, mono_color: str | None = None) -> str:
    if mono_color:
        return mono_color
    return VOLTAGE_COLORS.get(rank, FALLBACK_COLOR)


def annotate_rank(feature: dict) -> dict:
    """
    Store the rank on the feature's properties (creating them if needed).
    """
    properties = dict(feature.get("properties") or {})
    properties["voltage_rank"] = voltage_rank(properties.get("VOLT_CLASS"))
    feature["properties"] = properties
    return feature
