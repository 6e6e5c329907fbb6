#!/usr/bin/env python3
"""
Rule Loader - Load YAML rules from the report_rules directory
shared.yaml holds text cleanup and consolidation settings,
numbered rule files hold report detection markers
"""

import os
import yaml
import logging
import hashlib
from pathlib import Path
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class RuleLoader:
    """Load and cache YAML rule files"""

    def __init__(self, rules_dir: Path, enable_hot_reload: Optional[bool] = None):
        """
        Initialize rule loader with rules directory

        Args:
            rules_dir: Path to report_rules directory
            enable_hot_reload: Enable checksum-based hot-reload. When None, the
                              REPORTS_HOT_RELOAD environment variable decides (default: off)
        """
        if enable_hot_reload is None:
            enable_hot_reload = os.environ.get('REPORTS_HOT_RELOAD', '0') == '1'

        self.rules_dir = Path(rules_dir)
        self._rules_cache = {}
        self._file_checksums = {} if enable_hot_reload else None  # Only track when enabled
        self._enable_hot_reload = enable_hot_reload

    def _calculate_file_checksum(self, file_path: Path) -> str:
        """Calculate MD5 checksum for a file"""
        try:
            with open(file_path, 'rb') as f:
                return hashlib.md5(f.read()).hexdigest()
        except OSError as e:
            logger.warning(f"Error calculating checksum for {file_path}: {e}")
            return ''

    def _should_reload_file(self, filename: str, rule_file: Path) -> bool:
        """Check if a rule file should be reloaded based on checksum"""
        # Fast path: when hot-reload is disabled, only check cache
        if not self._enable_hot_reload:
            return filename not in self._rules_cache

        if not rule_file.exists():
            return False

        current_checksum = self._calculate_file_checksum(rule_file)
        cached_checksum = self._file_checksums.get(filename)

        if current_checksum != cached_checksum:
            if cached_checksum:
                logger.debug(f"Rule file {filename} modified, reloading...")
            return True

        return False

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load a YAML file directly"""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading YAML file {file_path}: {e}")
            return {}

    def load_rule_file_by_name(self, filename: str) -> Dict[str, Any]:
        """
        Load a rule file from the rules directory by name

        Args:
            filename: Rule file name (e.g., 'shared.yaml')

        Returns:
            Rules dictionary, empty if the file does not exist
        """
        rule_file = self.rules_dir / filename
        if not rule_file.exists():
            logger.warning(f"Rule file not found: {rule_file}")
            return {}

        if self._should_reload_file(filename, rule_file):
            self._rules_cache[filename] = self._load_yaml_file(rule_file)
            if self._enable_hot_reload:
                self._file_checksums[filename] = self._calculate_file_checksum(rule_file)
            logger.debug(f"Loaded {filename}")

        return self._rules_cache.get(filename, {})

    def get_text_cleanup_rules(self) -> Dict[str, Any]:
        """Get text cleanup patterns from shared.yaml"""
        return self.load_rule_file_by_name('shared.yaml').get('text_cleanup', {})

    def get_consolidation_rules(self) -> Dict[str, Any]:
        """Get consolidation settings from shared.yaml"""
        return self.load_rule_file_by_name('shared.yaml').get('consolidation', {})

    def get_report_detection_rules(self) -> Dict[str, Any]:
        """Get report type detection rules from 10_report_detection.yaml"""
        return self.load_rule_file_by_name('10_report_detection.yaml')

    def clear_cache(self):
        """Clear the rules cache"""
        logger.debug("Clearing rules cache")
        self._rules_cache.clear()
        if self._file_checksums is not None:
            self._file_checksums.clear()
