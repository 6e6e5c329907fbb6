#!/usr/bin/env python3
"""
Key Cleanup - Normalize parsed report keys and merge reports per month

Parsed reports nest their data as sections -> title -> items -> label.
Consolidation cleans every key (snake_case, no numbering or parenthesised
suffixes), lifts the "sections" and "items" wrappers into their parent and
merges every single-month report that starts on the same date.
"""

import re
import logging
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

STRUCTURAL_KEYS = ('sections', 'items')
DATE_RANGE_KEY = 'date_range'
DEFAULT_SKIP_KEYS = ('report_type',)

PARENTHESISED_RE = re.compile(r'\(.*\)')
NUMBERING_PREFIX_RE = re.compile(r'^\w\. ', re.ASCII)


def cleanup_key(key: str) -> str:
    """
    Clean a key: drop a parenthesised suffix and "a. " numbering,
    join words with underscores and lowercase

    >>> cleanup_key('Pantry Stats (2024)')
    'pantry_stats'
    """
    key = key.strip()
    key = PARENTHESISED_RE.sub('', key, count=1)
    key = NUMBERING_PREFIX_RE.sub('', key, count=1)
    # " / " must go before single spaces or it would become "___"
    key = key.replace(' / ', '_')
    key = key.strip()
    key = key.replace(' ', '_')
    return key.lower()


def _lifted_key(key: str) -> str:
    """Clean a key, renaming titles that would read as a wrapper key"""
    cleaned = cleanup_key(key)
    if cleaned in STRUCTURAL_KEYS:
        renamed = f"{cleaned}_section"
        logger.warning(f"Renaming key {key!r} to {renamed!r}, it collides with a wrapper key")
        return renamed
    return cleaned


def cleanup_keys(value: Any) -> Any:
    """
    Recursively clean every mapping key in a parsed report tree

    The children of "sections" and "items" are lifted into the mapping that
    holds them and the wrapper keys themselves are dropped. Leaf values
    (strings, numbers, None) pass through unchanged.
    """
    if isinstance(value, dict):
        cleaned = {}
        for key, child in value.items():
            if key in STRUCTURAL_KEYS:
                continue
            cleaned[_lifted_key(key)] = cleanup_keys(child)

        for structural_key in STRUCTURAL_KEYS:
            lifted = value.get(structural_key)
            if isinstance(lifted, dict):
                for key, child in lifted.items():
                    cleaned[_lifted_key(key)] = cleanup_keys(child)
        return cleaned

    if isinstance(value, list):
        return [cleanup_keys(child) for child in value]

    return value


def _month_token(date: str) -> str:
    return date.split('/')[0]


def is_single_month(report: Dict[str, Any]) -> bool:
    """True when the report's date range starts and ends in the same month"""
    date_range = report.get(DATE_RANGE_KEY)
    if not isinstance(date_range, dict) or not date_range.get('from') or not date_range.get('to'):
        return False
    return _month_token(date_range['from']) == _month_token(date_range['to'])


def consolidate_reports(reports: Iterable[Dict[str, Any]], skip_keys: Optional[Iterable[str]] = None) -> List[Dict[str, Any]]:
    """
    Consolidate parsed reports into one report per month

    Reports covering more than one month, or without a date range, are left
    out. Months are ordered by their "from" date as plain strings, so
    "10/1/2025" sorts before "2/1/2025". Within a month, reports are merged
    in input order and later values replace earlier ones.

    Args:
        reports: Parsed reports (as produced by parse_report)
        skip_keys: Extra top-level keys left out of the merged report (report_type is always left out)

    Returns:
        List of consolidated reports, one per month
    """
    skip_keys = set(DEFAULT_SKIP_KEYS) | set(skip_keys or ())

    month_reports = []
    for report in reports:
        cleaned = cleanup_keys(report)
        if is_single_month(cleaned):
            month_reports.append(cleaned)
        elif cleaned.get(DATE_RANGE_KEY) is None:
            logger.warning(f"Skipping {cleaned.get('report_type', 'unknown')} report without a date range")
        else:
            logger.debug(f"Skipping report spanning several months: {cleaned[DATE_RANGE_KEY]}")

    unique_dates = sorted({report[DATE_RANGE_KEY]['from'] for report in month_reports})

    consolidated_reports = []
    for date in unique_dates:
        logger.debug(f"Handling month: {date}")
        consolidated_report = {}
        for report in month_reports:
            if report[DATE_RANGE_KEY]['from'] != date:
                continue
            for key, value in report.items():
                if key not in skip_keys:
                    consolidated_report[key] = value
        consolidated_reports.append(consolidated_report)

    return consolidated_reports
