"""
Service Report Parser
Turns text extracted from monthly service report PDFs (pantry statistics,
program statistics, service summaries) into structured records and merges
the records of each month.
"""

from .report_text import TextNormalizer, clean_report_text, to_lines
from .report_detector import ReportDetector, ReportType, identify_report
from .section_scanner import LineItem, default_line_grammar, scan_section
from .report_parsers import (
    ReportParser,
    PantryStatsParser,
    ProgramStatsParser,
    ServiceSummaryParser,
    get_parser,
    parse_pantry_stats,
    parse_program_stats,
    parse_service_summary,
)
from .key_cleanup import cleanup_key, cleanup_keys, consolidate_reports
from .parse_report import parse_report
from .rule_loader import RuleLoader

__version__ = "0.8.0"

__all__ = [
    'TextNormalizer',
    'clean_report_text',
    'to_lines',
    'ReportDetector',
    'ReportType',
    'identify_report',
    'LineItem',
    'default_line_grammar',
    'scan_section',
    'ReportParser',
    'PantryStatsParser',
    'ProgramStatsParser',
    'ServiceSummaryParser',
    'get_parser',
    'parse_pantry_stats',
    'parse_program_stats',
    'parse_service_summary',
    'cleanup_key',
    'cleanup_keys',
    'consolidate_reports',
    'parse_report',
    'RuleLoader',
]
