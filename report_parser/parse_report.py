#!/usr/bin/env python3
"""
Parse Report - Identify a report and route it to its parser
"""

import logging
from typing import Any, Dict, List, Optional

from .report_detector import ReportDetector, ReportType
from .report_parsers import get_parser
from .report_text import TextNormalizer

logger = logging.getLogger(__name__)


def parse_report(
    pages: List[str],
    detector: Optional[ReportDetector] = None,
    normalizer: Optional[TextNormalizer] = None,
) -> Optional[Dict[str, Any]]:
    """
    Parse the pages of one report

    The report type is detected on the full text. The last page is left out
    of parsing (it only carries the report footer).

    Args:
        pages: Text of each PDF page, in order
        detector: ReportDetector to use (optional, built-in markers by default)
        normalizer: TextNormalizer to use (optional, built-in patterns by default)

    Returns:
        Parsed report with report_type first, or None when the type is unknown
    """
    detector = detector or ReportDetector()
    report_type = detector.identify_report('\n'.join(pages))

    if report_type == ReportType.UNKNOWN:
        logger.warning("Unknown report type, skipping report")
        return None

    logger.info(f"Identified report type: {report_type.value}")
    text = '\n'.join(pages[:-1])
    report = get_parser(report_type, normalizer).parse(text)
    return {'report_type': report_type.value, **report}
