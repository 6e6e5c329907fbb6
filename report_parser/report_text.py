#!/usr/bin/env python3
"""
Report Text - Clean extracted report text and split it into lines

Strips page separators, footers, letterhead and watermark noise left by
PDF extraction. Every parser consumes the line list produced by to_lines().
"""

import re
import logging
from typing import Dict, List, Optional, Pattern

logger = logging.getLogger(__name__)

# Mirrors text_cleanup.patterns in report_rules/shared.yaml
DEFAULT_CLEANUP_PATTERNS = [
    {'name': 'page_separator', 'regex': r'-- \d+ of \d+ --'},
    {'name': 'page_footer', 'regex': r'Page \d+ of \d+.*'},
    {'name': 'printed_from', 'regex': r'Report printed from TARA.*'},
    {'name': 'letterhead_address', 'regex': r'\d+ Kennedy Avenue, Cincinnati, OH.*'},
    {'name': 'letterhead_phone', 'regex': r'Ph:.*Fax:.*'},
    {'name': 'win2pdf_watermark', 'regex': r'This document was created with the Win2PDF.*', 'dotall': True},
    {'name': 'url', 'regex': r'https://[^\s]+'},
    {'name': 'purchase_watermark', 'regex': r'Visit.*purchase/?', 'dotall': True},
]


class TextNormalizer:
    """Remove known boilerplate from report text using cleanup rules"""

    def __init__(self, rules: Optional[Dict] = None):
        """
        Initialize with text cleanup rules

        Args:
            rules: text_cleanup section of shared.yaml (optional, defaults built in)
        """
        rules = rules or {}
        pattern_defs = rules.get('patterns') or DEFAULT_CLEANUP_PATTERNS
        self.compiled_patterns: List[Pattern] = [self._compile(p) for p in pattern_defs]

    @classmethod
    def from_rule_loader(cls, rule_loader) -> 'TextNormalizer':
        """Build a normalizer from the rules directory of a RuleLoader"""
        return cls(rule_loader.get_text_cleanup_rules())

    @staticmethod
    def _compile(pattern_def: Dict) -> Pattern:
        flags = re.DOTALL if pattern_def.get('dotall') else 0
        return re.compile(pattern_def['regex'], flags)

    def clean(self, text: str) -> str:
        """
        Strip page separators, footers and other extraction noise

        Args:
            text: Raw text from PDF extraction

        Returns:
            Cleaned text
        """
        cleaned = text
        for pattern in self.compiled_patterns:
            cleaned = pattern.sub('', cleaned)
        return cleaned

    def to_lines(self, text: str) -> List[str]:
        """
        Clean report text and return non-empty trimmed lines

        Args:
            text: Raw text from PDF extraction

        Returns:
            List of trimmed, non-empty lines
        """
        lines = [line.strip() for line in self.clean(text).split('\n')]
        return [line for line in lines if line]


_default_normalizer = TextNormalizer()


def clean_report_text(text: str) -> str:
    """Clean report text with the built-in cleanup patterns"""
    return _default_normalizer.clean(text)


def to_lines(text: str) -> List[str]:
    """Clean report text and split it into trimmed, non-empty lines"""
    return _default_normalizer.to_lines(text)
