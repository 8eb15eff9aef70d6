import unittest

from core.geography import ancestors, descendants, expand_country_or_region


class TestGeography(unittest.TestCase):

    def test_country_expands_to_enclosing_levels(self):
        self.assertEqual(expand_country_or_region("France"), ["France", "Western Europe", "Europe"])

    def test_region_expands_both_ways(self):
        expanded = expand_country_or_region("Western Europe")
        self.assertEqual(expanded[:2], ["Western Europe", "Europe"])
        self.assertIn("Germany", expanded)
        self.assertNotIn("Spain", expanded)

    def test_continent_includes_regions_and_countries(self):
        expanded = descendants("Oceania")
        self.assertEqual(expanded, ["Australia & New Zealand", "Australia", "New Zealand"])
        self.assertEqual(ancestors("Oceania"), [])

    def test_single_level_region_does_not_loop(self):
        self.assertEqual(ancestors("Brazil"), ["South America"])
        self.assertIn("Brazil", expand_country_or_region("South America"))

    def test_unknown_and_blank(self):
        self.assertEqual(expand_country_or_region("Atlantis"), ["Atlantis"])
        self.assertEqual(expand_country_or_region(""), [])
        self.assertEqual(expand_country_or_region(None), [])
        self.assertEqual(expand_country_or_region("  France "), ["France", "Western Europe", "Europe"])


if __name__ == '__main__':
    unittest.main()
