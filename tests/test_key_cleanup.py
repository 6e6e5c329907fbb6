#!/usr/bin/env python3
"""
Key Cleanup Tests
Tests key normalization, wrapper lifting and per-month consolidation.
"""

import unittest

from report_parser.key_cleanup import cleanup_key, cleanup_keys, consolidate_reports, is_single_month

JANUARY = {'from': '1/1/2025', 'to': '1/31/2025'}


class TestCleanupKey(unittest.TestCase):
    """Test single key normalization"""

    def test_parenthesised_suffix_removed(self):
        """Test that a parenthesised suffix is dropped"""
        self.assertEqual(cleanup_key('Pantry Stats (2024)'), 'pantry_stats')

    def test_numbering_prefix_removed(self):
        """Test that one leading "a. " or "1. " numbering is dropped"""
        self.assertEqual(cleanup_key('a. Households'), 'households')
        self.assertEqual(cleanup_key('1. Age groups'), 'age_groups')

    def test_slash_separator(self):
        """Test that " / " becomes a single underscore"""
        self.assertEqual(cleanup_key('Food / Hygiene kits'), 'food_hygiene_kits')

    def test_trimmed_and_lowercased(self):
        """Test trimming, underscores and lowercasing"""
        self.assertEqual(cleanup_key('  Under 18 '), 'under_18')
        self.assertEqual(cleanup_key('Households'), 'households')

    def test_idempotent(self):
        """Test that cleaning an already clean key changes nothing"""
        for key in ['Pantry Stats (2024)', 'a. Households', 'Food / Hygiene kits',
                    '  Under 18 ', '18 to 64', 'date_range', 'Client visit frequency']:
            once = cleanup_key(key)
            self.assertEqual(cleanup_key(once), once, key)


class TestCleanupKeys(unittest.TestCase):
    """Test recursive key cleanup"""

    def test_items_lifted(self):
        """Test that items children are lifted into their parent"""
        self.assertEqual(cleanup_keys({'X': {'items': {'A B': 1}}}), {'x': {'a_b': 1}})

    def test_parsed_report_flattened(self):
        """Test that sections and items wrappers disappear from a parsed report"""
        report = {
            'report_type': 'pantry-stats',
            'date_range': JANUARY,
            'sections': {
                'Number of households': {'items': {'Households without children': 75}},
            },
        }
        self.assertEqual(cleanup_keys(report), {
            'report_type': 'pantry-stats',
            'date_range': JANUARY,
            'number_of_households': {'households_without_children': 75},
        })

    def test_leaves_pass_through(self):
        """Test that non-mapping values are unchanged"""
        self.assertEqual(cleanup_keys({'Hours': 1.5, 'Note': 'A B', 'Missing': None}),
                         {'hours': 1.5, 'note': 'A B', 'missing': None})
        self.assertEqual(cleanup_keys(7), 7)
        self.assertIsNone(cleanup_keys(None))

    def test_lists_cleaned_elementwise(self):
        """Test that mappings inside lists are cleaned"""
        self.assertEqual(cleanup_keys({'Rows': [{'A B': 1}, 2]}), {'rows': [{'a_b': 1}, 2]})

    def test_lifted_keys_override_siblings(self):
        """Test that lifted children win over sibling keys with the same cleaned name"""
        self.assertEqual(cleanup_keys({'Total': 1, 'items': {'total': 2}}), {'total': 2})

    def test_no_wrapper_keys_survive(self):
        """Test that nested wrappers are removed at every level"""
        cleaned = cleanup_keys({'sections': {'S': {'items': {'I': {'items': {'Deep': 1}}}}}})
        self.assertEqual(cleaned, {'s': {'i': {'deep': 1}}})

    def test_section_titled_items_renamed(self):
        """Test that a section whose title cleans to a wrapper key is renamed"""
        report = {'sections': {'C. Items': {'items': {'Cans': 5}}, 'Sections': {'items': {}}}}
        with self.assertLogs('report_parser.key_cleanup', level='WARNING') as logs:
            cleaned = cleanup_keys(report)
        self.assertEqual(cleaned, {'items_section': {'cans': 5}, 'sections_section': {}})
        self.assertEqual(len(logs.records), 2)

    def test_consolidated_report_has_no_wrapper_keys(self):
        """Test that a month merged from an Items section holds no items key"""
        report = {'report_type': 'pantry-stats', 'date_range': JANUARY,
                  'sections': {'Items': {'items': {'Cans': 5}}}}
        with self.assertLogs('report_parser.key_cleanup', level='WARNING'):
            merged = consolidate_reports([report])
        self.assertNotIn('items', merged[0])
        self.assertEqual(merged[0]['items_section'], {'cans': 5})


class TestConsolidateReports(unittest.TestCase):
    """Test merging of parsed reports per month"""

    def test_same_month_merged(self):
        """Test that reports of the same month merge, later input winning"""
        pantry = {
            'report_type': 'pantry-stats',
            'date_range': JANUARY,
            'sections': {'Shared': {'items': {'A': 1}}, 'Only One': {'items': {'B': 2}}},
        }
        summary = {
            'report_type': 'service-summary',
            'date_range': JANUARY,
            'sections': {'Shared': {'items': {'C': 3}}},
            'volunteer_hours': 10.0,
            'operating_days': 4,
        }
        self.assertEqual(consolidate_reports([pantry, summary]), [{
            'date_range': JANUARY,
            'shared': {'c': 3},
            'only_one': {'b': 2},
            'volunteer_hours': 10.0,
            'operating_days': 4,
        }])

    def test_report_type_dropped(self):
        """Test that report_type never reaches the consolidated report"""
        merged = consolidate_reports([{'report_type': 'program-stats', 'date_range': JANUARY, 'sections': {}}])
        self.assertEqual(merged, [{'date_range': JANUARY}])

    def test_multi_month_report_excluded(self):
        """Test that a report straddling two months is left out"""
        report = {'report_type': 'pantry-stats', 'date_range': {'from': '1/15/2025', 'to': '2/14/2025'},
                  'sections': {'S': {'items': {'A': 1}}}}
        self.assertEqual(consolidate_reports([report]), [])

    def test_missing_date_range_excluded(self):
        """Test that a report without dates is left out with a warning"""
        report = {'report_type': 'service-summary', 'date_range': None, 'sections': {}}
        with self.assertLogs('report_parser.key_cleanup', level='WARNING'):
            self.assertEqual(consolidate_reports([report]), [])

    def test_months_in_string_order(self):
        """Test that months are ordered as plain strings, not by calendar"""
        reports = [
            {'report_type': 'pantry-stats', 'date_range': {'from': '2/1/2025', 'to': '2/28/2025'}, 'sections': {}},
            {'report_type': 'pantry-stats', 'date_range': {'from': '10/1/2025', 'to': '10/31/2025'}, 'sections': {}},
            {'report_type': 'pantry-stats', 'date_range': {'from': '1/1/2025', 'to': '1/31/2025'}, 'sections': {}},
        ]
        froms = [r['date_range']['from'] for r in consolidate_reports(reports)]
        self.assertEqual(froms, ['1/1/2025', '10/1/2025', '2/1/2025'])

    def test_grouped_by_literal_from_date(self):
        """Test that reports starting on different days of a month stay separate"""
        reports = [
            {'report_type': 'pantry-stats', 'date_range': {'from': '3/1/2025', 'to': '3/31/2025'}, 'sections': {}},
            {'report_type': 'program-stats', 'date_range': {'from': '3/2/2025', 'to': '3/31/2025'}, 'sections': {}},
        ]
        self.assertEqual(len(consolidate_reports(reports)), 2)

    def test_custom_skip_keys(self):
        """Test that skip_keys are left out in addition to report_type"""
        report = {'report_type': 'pantry-stats', 'date_range': JANUARY, 'operating_days': 3}
        merged = consolidate_reports([report], skip_keys=['operating_days'])
        self.assertEqual(merged, [{'date_range': JANUARY}])

    def test_report_type_skipped_with_empty_skip_keys(self):
        """Test that an empty skip_keys list still leaves out report_type"""
        merged = consolidate_reports([{'report_type': 'pantry-stats', 'date_range': JANUARY}], skip_keys=[])
        self.assertEqual(merged, [{'date_range': JANUARY}])
        self.assertNotIn('report_type', merged[0])

    def test_input_not_modified(self):
        """Test that consolidation does not change the input reports"""
        report = {'report_type': 'pantry-stats', 'date_range': JANUARY, 'sections': {'S': {'items': {'A': 1}}}}
        consolidate_reports([report])
        self.assertEqual(report['sections'], {'S': {'items': {'A': 1}}})

    def test_is_single_month(self):
        """Test the month comparison on the leading month token"""
        self.assertTrue(is_single_month({'date_range': JANUARY}))
        self.assertFalse(is_single_month({'date_range': {'from': '1/31/2025', 'to': '2/1/2025'}}))
        self.assertFalse(is_single_month({}))


if __name__ == '__main__':
    unittest.main()
