from __future__ import annotations

FEET_PER_METRE = 3.28084


def metres_to_feet(value: float) -> float:
    return value * FEET_PER_METRE


def format_level(metres: float, units: str = "metric") -> str:
    """Render a tide height for display (``metric``, ``imperial`` or ``mixed``)."""
    if units == "imperial":
        return f"{metres_to_feet(metres):.2f} ft"
    if units == "mixed":
        return f"{metres:.2f} m ({metres_to_feet(metres):.2f} ft)"
    return f"{metres:.2f} m"


__all__ = ["FEET_PER_METRE", "format_level", "metres_to_feet"]
