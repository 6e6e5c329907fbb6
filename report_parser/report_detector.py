#!/usr/bin/env python3
"""
Report Detection - Identify the report type from extracted text
Applies the ordered markers from 10_report_detection.yaml
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class ReportType(str, Enum):
    """Known report families"""
    PANTRY_STATS = 'pantry-stats'
    PROGRAM_STATS = 'program-stats'
    SERVICE_SUMMARY = 'service-summary'
    UNKNOWN = 'unknown'


# Mirrors detection_order in report_rules/10_report_detection.yaml
DEFAULT_DETECTION_ORDER = [
    {'report_type': 'pantry-stats', 'marker': 'Pantry Statistical Report'},
    {'report_type': 'program-stats', 'marker': 'Program Statistics'},
    {'report_type': 'service-summary', 'marker': 'Service summary'},
]


class ReportDetector:
    """Detect report type using ordered literal markers"""

    def __init__(self, rules: Optional[Dict] = None):
        """
        Initialize report detector

        Args:
            rules: Contents of 10_report_detection.yaml (optional, defaults built in)
        """
        rules = rules or {}
        detection_order = rules.get('detection_order') or DEFAULT_DETECTION_ORDER
        self.markers: List[Tuple[ReportType, str]] = [
            (ReportType(entry['report_type']), entry['marker'])
            for entry in detection_order
        ]

    @classmethod
    def from_rule_loader(cls, rule_loader) -> 'ReportDetector':
        """Build a detector from the rules directory of a RuleLoader"""
        return cls(rule_loader.get_report_detection_rules())

    def identify_report(self, text: str) -> ReportType:
        """
        Identify the report type of raw (uncleaned) report text

        Markers are checked in order and the first one found wins.

        Args:
            text: Raw text extracted from the report

        Returns:
            Detected ReportType, ReportType.UNKNOWN when no marker matches
        """
        for report_type, marker in self.markers:
            if marker in text:
                logger.debug(f"Detected report type {report_type.value} from marker '{marker}'")
                return report_type
        return ReportType.UNKNOWN


_default_detector = ReportDetector()


def identify_report(text: str) -> ReportType:
    """Identify the report type with the built-in marker order"""
    return _default_detector.identify_report(text)
