#!/usr/bin/env python3
"""
Rule Loader Tests
Tests loading of the packaged YAML rules and the hot-reload toggle.
"""

import os
import shutil
import tempfile
import unittest
from pathlib import Path

from report_parser.config import RULES_DIR
from report_parser.report_detector import DEFAULT_DETECTION_ORDER, ReportDetector, ReportType
from report_parser.report_text import DEFAULT_CLEANUP_PATTERNS, TextNormalizer
from report_parser.rule_loader import RuleLoader


class TestPackagedRules(unittest.TestCase):
    """Test that the packaged rule files match the built-in defaults"""

    @classmethod
    def setUpClass(cls):
        """Set up test fixtures"""
        cls.rule_loader = RuleLoader(RULES_DIR)

    def test_cleanup_patterns_match_defaults(self):
        """Test that shared.yaml carries the same cleanup patterns as the code defaults"""
        patterns = self.rule_loader.get_text_cleanup_rules()['patterns']
        self.assertEqual([p['regex'] for p in patterns], [p['regex'] for p in DEFAULT_CLEANUP_PATTERNS])
        self.assertEqual([bool(p.get('dotall')) for p in patterns],
                         [bool(p.get('dotall')) for p in DEFAULT_CLEANUP_PATTERNS])

    def test_detection_order_matches_defaults(self):
        """Test that 10_report_detection.yaml keeps the marker precedence"""
        detection_order = self.rule_loader.get_report_detection_rules()['detection_order']
        self.assertEqual(detection_order, DEFAULT_DETECTION_ORDER)

    def test_consolidation_skip_keys(self):
        """Test that report_type is skipped during consolidation"""
        self.assertEqual(self.rule_loader.get_consolidation_rules()['skip_keys'], ['report_type'])

    def test_components_from_rule_loader(self):
        """Test that normalizer and detector build from the rules directory"""
        normalizer = TextNormalizer.from_rule_loader(self.rule_loader)
        detector = ReportDetector.from_rule_loader(self.rule_loader)
        self.assertEqual(normalizer.to_lines("A\n-- 1 of 2 --\nPage 1 of 2\nB"), ["A", "B"])
        self.assertEqual(detector.identify_report("Program Statistics Pantry Statistical Report"),
                         ReportType.PANTRY_STATS)


class TestRuleLoaderHotReload(unittest.TestCase):
    """Test hot-reload toggling and caching"""

    def setUp(self):
        self.rules_dir = Path(tempfile.mkdtemp())
        shutil.copy(RULES_DIR / 'shared.yaml', self.rules_dir / 'shared.yaml')
        self._original_env = os.environ.pop('REPORTS_HOT_RELOAD', None)

    def tearDown(self):
        shutil.rmtree(self.rules_dir, ignore_errors=True)
        if self._original_env is not None:
            os.environ['REPORTS_HOT_RELOAD'] = self._original_env
        else:
            os.environ.pop('REPORTS_HOT_RELOAD', None)

    def test_hot_reload_default_off(self):
        """Test that hot-reload is OFF by default"""
        loader = RuleLoader(self.rules_dir)
        self.assertFalse(loader._enable_hot_reload)
        self.assertIsNone(loader._file_checksums)

    def test_hot_reload_explicit_on(self):
        """Test that hot-reload can be explicitly enabled"""
        loader = RuleLoader(self.rules_dir, enable_hot_reload=True)
        self.assertTrue(loader._enable_hot_reload)
        self.assertIsInstance(loader._file_checksums, dict)

    def test_hot_reload_env_variable(self):
        """Test that REPORTS_HOT_RELOAD=1 enables hot-reload"""
        os.environ['REPORTS_HOT_RELOAD'] = '1'
        self.assertTrue(RuleLoader(self.rules_dir)._enable_hot_reload)
        os.environ['REPORTS_HOT_RELOAD'] = '0'
        self.assertFalse(RuleLoader(self.rules_dir)._enable_hot_reload)

    def test_cached_without_hot_reload(self):
        """Test that edits are not picked up when hot-reload is off"""
        loader = RuleLoader(self.rules_dir, enable_hot_reload=False)
        loader.get_consolidation_rules()
        (self.rules_dir / 'shared.yaml').write_text("consolidation:\n  skip_keys: [other]\n")
        self.assertEqual(loader.get_consolidation_rules()['skip_keys'], ['report_type'])
        loader.clear_cache()
        self.assertEqual(loader.get_consolidation_rules()['skip_keys'], ['other'])

    def test_reloaded_with_hot_reload(self):
        """Test that edits are picked up when hot-reload is on"""
        loader = RuleLoader(self.rules_dir, enable_hot_reload=True)
        self.assertEqual(loader.get_consolidation_rules()['skip_keys'], ['report_type'])
        (self.rules_dir / 'shared.yaml').write_text("consolidation:\n  skip_keys: [other]\n")
        self.assertEqual(loader.get_consolidation_rules()['skip_keys'], ['other'])

    def test_missing_rule_file(self):
        """Test that a missing rule file loads as empty rules"""
        loader = RuleLoader(self.rules_dir)
        with self.assertLogs('report_parser.rule_loader', level='WARNING'):
            self.assertEqual(loader.get_report_detection_rules(), {})

    def test_invalid_yaml(self):
        """Test that an unreadable YAML file loads as empty rules"""
        (self.rules_dir / 'shared.yaml').write_text("text_cleanup: [unclosed\n")
        loader = RuleLoader(self.rules_dir)
        with self.assertLogs('report_parser.rule_loader', level='ERROR'):
            self.assertEqual(loader.get_text_cleanup_rules(), {})


if __name__ == '__main__':
    unittest.main()
