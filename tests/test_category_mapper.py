import unittest

from ecosort.ai.categories import map_waste_category
from ecosort.ai.tips import all_profiles, profile_for
from ecosort.ai.types import WasteCategory


class CategoryMapperTests(unittest.TestCase):
    def test_keywords_map_case_insensitively(self) -> None:
        cases = {
            "Plastic_Bottle": WasteCategory.PLASTIC,
            "shredded PAPER": WasteCategory.PAPER,
            "cardboard-box": WasteCategory.CARDBOARD,
            "Metal Can": WasteCategory.METAL,
            "glass_jar": WasteCategory.GLASS,
            "Food waste": WasteCategory.ORGANIC,
            "organic-matter": WasteCategory.ORGANIC,
        }
        for label, expected in cases.items():
            with self.subTest(label=label):
                self.assertEqual(map_waste_category(label), expected)

    def test_unknown_labels_fall_back_to_trash(self) -> None:
        for label in ("styrofoam", "battery", "", "  "):
            with self.subTest(label=label):
                self.assertEqual(map_waste_category(label), WasteCategory.TRASH)

    def test_earliest_rule_wins_when_several_match(self) -> None:
        self.assertEqual(map_waste_category("plastic-coated paper"), WasteCategory.PLASTIC)
        self.assertEqual(map_waste_category("paper cardboard mix"), WasteCategory.PAPER)
        self.assertEqual(map_waste_category("glass food jar"), WasteCategory.GLASS)
        self.assertEqual(map_waste_category("metal_glass_lid"), WasteCategory.METAL)


class TipRepositoryTests(unittest.TestCase):
    def test_every_category_has_a_complete_profile(self) -> None:
        profiles = all_profiles()
        self.assertEqual(set(profiles), set(WasteCategory))
        for category, profile in profiles.items():
            with self.subTest(category=category):
                self.assertTrue(profile.display_category)
                self.assertTrue(profile.tips)
                self.assertTrue(profile.impact)

    def test_display_names(self) -> None:
        self.assertEqual(profile_for(WasteCategory.PLASTIC).display_category, "Dry Waste (Sukha Kachra)")
        self.assertEqual(profile_for(WasteCategory.ORGANIC).display_category, "Wet Waste (Geela Kachra)")
        self.assertEqual(profile_for(WasteCategory.TRASH).display_category, "Reject Waste")

    def test_unknown_keys_reuse_trash_profile(self) -> None:
        trash = profile_for(WasteCategory.TRASH)
        self.assertIs(profile_for("e-waste"), trash)
        self.assertIs(profile_for(None), trash)
        self.assertIs(profile_for("metal"), profile_for(WasteCategory.METAL))

    def test_profiles_are_read_only(self) -> None:
        with self.assertRaises(TypeError):
            all_profiles()[WasteCategory.TRASH] = profile_for(WasteCategory.PAPER)  # type: ignore[index]


if __name__ == "__main__":
    unittest.main()
