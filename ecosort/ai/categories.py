from __future__ import annotations

from .types import WasteCategory

# Evaluated in order; the first rule with a matching keyword wins.
CATEGORY_RULES: tuple[tuple[tuple[str, ...], WasteCategory], ...] = (
    (("plastic",), WasteCategory.PLASTIC),
    (("paper",), WasteCategory.PAPER),
    (("cardboard",), WasteCategory.CARDBOARD),
    (("metal",), WasteCategory.METAL),
    (("glass",), WasteCategory.GLASS),
    (("food", "organic"), WasteCategory.ORGANIC),
)


def map_waste_category(label: str) -> WasteCategory:
    """Map a free-text detection label onto a coarse waste category."""
    lowered = (label or "").lower()
    for keywords, category in CATEGORY_RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return WasteCategory.TRASH


__all__ = ["CATEGORY_RULES", "map_waste_category"]
