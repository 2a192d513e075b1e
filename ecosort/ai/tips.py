from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .types import CategoryProfile, WasteCategory


_DRY_WASTE = "Dry Waste (Sukha Kachra)"


_PROFILES: Mapping[WasteCategory, CategoryProfile] = MappingProxyType(
    {
        WasteCategory.PLASTIC: CategoryProfile(
            display_category=_DRY_WASTE,
            tips=(
                "Rinse the item to remove food or drink residue.",
                "Crush bottles to save space in the bin.",
                "Remove caps and lids; they are often a different plastic.",
                "Check the recycling symbol to confirm the plastic type.",
                "Keep soft plastics such as bags and wrappers separate.",
            ),
            impact="Recycling one ton of plastic can save 7,500 kWh of electricity.",
        ),
        WasteCategory.PAPER: CategoryProfile(
            display_category=_DRY_WASTE,
            tips=(
                "Ensure paper is clean and free of food or grease.",
                "Remove plastic wrapping and windows from envelopes.",
                "Staples are usually fine to leave in.",
                "Avoid shredding unless necessary; short fibres are harder to recycle.",
                "Flatten paper before putting it in the bin.",
            ),
            impact="Recycling one ton of paper saves 17 trees.",
        ),
        WasteCategory.CARDBOARD: CategoryProfile(
            display_category=_DRY_WASTE,
            tips=(
                "Flatten boxes to save space.",
                "Remove packing tape and labels where possible.",
                "Keep cardboard dry; wet cardboard is hard to recycle.",
                "Avoid greasy pizza boxes; compost or discard the soiled parts.",
                "Stack flattened boxes neatly for collection.",
            ),
            impact="Recycling cardboard uses 75% less energy than making it from new materials.",
        ),
        WasteCategory.METAL: CategoryProfile(
            display_category=_DRY_WASTE,
            tips=(
                "Rinse cans to remove food residue.",
                "Watch out for sharp edges on opened lids.",
                "Labels can stay on; they burn off during processing.",
                "Do not crush or puncture aerosol cans.",
                "Aluminium foil can be recycled if it is clean.",
            ),
            impact="One recycled aluminium can saves enough energy to run a TV for 3 hours.",
        ),
        WasteCategory.GLASS: CategoryProfile(
            display_category=_DRY_WASTE,
            tips=(
                "Rinse bottles and jars before recycling.",
                "Remove metal or plastic lids.",
                "Don't recycle broken glass; wrap it and put it in reject waste.",
                "Mirrors, window panes and light bulbs are not recyclable glass.",
                "Separate glass by colour if your local collection requires it.",
            ),
            impact="Recycling glass cuts related air pollution by around 20%.",
        ),
        WasteCategory.ORGANIC: CategoryProfile(
            display_category="Wet Waste (Geela Kachra)",
            tips=(
                "Use a bin with a lid to keep out pests and odours.",
                "Include fruit and vegetable peels, tea leaves and eggshells.",
                "Avoid adding too much oil, meat or dairy.",
                "Line the bin with newspaper instead of plastic bags.",
                "Use the collected waste for home composting.",
            ),
            impact="Composting organic waste reduces methane emissions from landfills.",
        ),
        WasteCategory.TRASH: CategoryProfile(
            display_category="Reject Waste",
            tips=(
                "Use this bin for items that cannot be recycled or composted.",
                "Includes multi-layer chip packets and candy wrappers.",
                "Styrofoam, used tissues and diapers belong here.",
                "Always check packaging for disposal instructions.",
                "Reduce non-recyclable purchases where you can.",
            ),
            impact="Segregating reject waste prevents contamination of recyclables.",
        ),
    }
)


def profile_for(category: WasteCategory | str | None) -> CategoryProfile:
    """Return the profile for ``category``, falling back to the trash profile."""
    try:
        key = WasteCategory(category)
    except ValueError:
        return _PROFILES[WasteCategory.TRASH]
    return _PROFILES.get(key, _PROFILES[WasteCategory.TRASH])


def all_profiles() -> Mapping[WasteCategory, CategoryProfile]:
    return _PROFILES


__all__ = ["all_profiles", "profile_for"]
