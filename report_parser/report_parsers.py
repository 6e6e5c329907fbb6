#!/usr/bin/env python3
"""
Report Parsers - One parser per report family

Each parser walks the cleaned report lines top to bottom, picks up the date
range, recognises its section headers and hands the data lines of every
section to scan_section() with its own line grammar and boundary test.

    Scanning --header--> InSection --boundary line--> Scanning (same line)
"""

import re
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

from .report_detector import ReportType
from .report_text import TextNormalizer
from .section_scanner import LineItem, LineGrammar, default_line_grammar, scan_section

logger = logging.getLogger(__name__)

DATE = r'\d{1,2}/\d{1,2}/\d{4}'
BARE_DATE_RANGE_RE = re.compile(rf'^({DATE})\s+to\s+({DATE})$')


class SectionHeader(NamedTuple):
    """A recognised section header and how to scan its body"""
    title: str
    initial_item: Optional[LineItem] = None
    line_grammar: Optional[LineGrammar] = None
    grammar_state: Any = None
    finalize: Optional[Callable[[Any], Optional[LineItem]]] = None


class ReportParser(ABC):
    """Base class for report parsers"""

    report_type: ReportType
    date_range_re = BARE_DATE_RANGE_RE

    def __init__(self, normalizer: Optional[TextNormalizer] = None):
        """
        Initialize parser

        Args:
            normalizer: TextNormalizer used to split text into lines (optional)
        """
        self.normalizer = normalizer or TextNormalizer()

    def new_result(self) -> Dict[str, Any]:
        return {'date_range': None, 'sections': {}}

    def parse_date_range(self, line: str) -> Optional[Dict[str, str]]:
        m = self.date_range_re.search(line)
        if not m:
            return None
        return {'from': m.group(1), 'to': m.group(2)}

    @abstractmethod
    def parse_header(self, line: str) -> Optional[SectionHeader]:
        """Return the section header on this line, or None"""

    @abstractmethod
    def boundary_test(self, line: str) -> bool:
        """True when the line starts the next section"""

    def line_grammar(self, line: str, state: Any = None) -> Tuple[Optional[LineItem], Any]:
        return default_line_grammar(line, state)

    def handle_line(self, lines: List[str], index: int, result: Dict[str, Any]) -> int:
        """
        Handle a line outside any section

        Returns:
            Index of the last line consumed
        """
        header = self.parse_header(lines[index])
        if header is None:
            return index

        return scan_section(
            lines,
            index,
            result['sections'],
            header.title,
            self.boundary_test,
            initial_item=header.initial_item,
            line_grammar=header.line_grammar or self.line_grammar,
            grammar_state=header.grammar_state,
            finalize=header.finalize,
        )

    def parse(self, text: str) -> Dict[str, Any]:
        """
        Parse report text into structured data

        Args:
            text: Text extracted from the report PDF

        Returns:
            Parsed report dictionary (date_range, sections and report specific fields)
        """
        result = self.new_result()
        lines = self.normalizer.to_lines(text)

        i = 0
        while i < len(lines):
            date_range = self.parse_date_range(lines[i])
            if date_range:
                result['date_range'] = date_range
            else:
                i = self.handle_line(lines, i, result)
            i += 1

        if result['date_range'] is None:
            logger.debug(f"No date range found in {self.report_type.value} report")
        return result


class PantryStatsParser(ReportParser):
    """Pantry Statistical Report: lettered sections A-F"""

    report_type = ReportType.PANTRY_STATS

    # "A. Number of households 75 Households without children"
    HEADER_WITH_DATA_RE = re.compile(r'^([A-F])\.\s+(.+?)\s+(\d+)\s+(.+)$')
    HEADER_RE = re.compile(r'^([A-F])\.\s+(.+)$')
    BOUNDARY_RE = re.compile(r'^[A-F]\.\s+')

    def parse_header(self, line: str) -> Optional[SectionHeader]:
        m = self.HEADER_WITH_DATA_RE.match(line)
        if m:
            return SectionHeader(
                title=m.group(2).strip(),
                initial_item=LineItem(m.group(4).strip(), int(m.group(3))),
            )
        m = self.HEADER_RE.match(line)
        if m:
            return SectionHeader(title=m.group(2).strip())
        return None

    def boundary_test(self, line: str) -> bool:
        return bool(self.BOUNDARY_RE.match(line))


class ProgramStatsParser(ReportParser):
    """Program Statistics: numbered sections, optional trailing "People" """

    report_type = ReportType.PROGRAM_STATS

    # "All people active from 1/1/2026 to 1/31/2026"
    date_range_re = re.compile(rf'All people active from ({DATE}) to ({DATE})')
    HEADER_RE = re.compile(r'^(\d+)\.\s+(.+?)(?:\s+People)?\s*$')
    BOUNDARY_RE = re.compile(r'^\d+\.\s+')

    def parse_header(self, line: str) -> Optional[SectionHeader]:
        m = self.HEADER_RE.match(line)
        if m:
            return SectionHeader(title=m.group(2).strip())
        return None

    def boundary_test(self, line: str) -> bool:
        return bool(self.BOUNDARY_RE.match(line))


class ClientTypesState(NamedTuple):
    """Client types grammar accumulator: label still waiting for its count"""
    pending: Optional[str] = None


CLIENT_TYPE_ITEM_RE = re.compile(r'^([a-e])\.\s+(.+?)\s+(\d+)\s*$', re.IGNORECASE)
CLIENT_TYPE_LABEL_RE = re.compile(r'^([a-e])\.\s+(.+)$', re.IGNORECASE)
CLIENT_TYPE_PREFIX_RE = re.compile(r'^[a-e]\.', re.IGNORECASE)
VISIT_FREQUENCY_ITEM_RE = re.compile(r'^([a-c])\.\s+(.+?)\s+(\d+)\s*$', re.IGNORECASE)
SERVICE_ITEM_RE = re.compile(r'^(.+?)\s+(\d+)\s*$')
BARE_COUNT_RE = re.compile(r'^\d+$')


def parse_client_types_line(line: str, state: ClientTypesState) -> Tuple[Optional[LineItem], ClientTypesState]:
    """
    Parse a Client types line, where labels may wrap and counts may sit on their own line

    - "a. Label 12"           item, clears any pending label
    - "12" while pending      completes the pending label
    - "a. Label"              becomes the pending label (an older one is dropped)
    - other text while pending is appended to the pending label
    """
    stripped = line.strip()

    if BARE_COUNT_RE.match(stripped) and state.pending:
        return LineItem(state.pending, int(stripped)), ClientTypesState()

    m = CLIENT_TYPE_ITEM_RE.match(line)
    if m:
        return LineItem(m.group(2).strip(), int(m.group(3))), ClientTypesState()

    m = CLIENT_TYPE_LABEL_RE.match(line)
    if m:
        return None, ClientTypesState(pending=m.group(2).strip())

    if state.pending and not CLIENT_TYPE_PREFIX_RE.match(line):
        return None, ClientTypesState(pending=f"{state.pending} {stripped}")

    return None, state


def finalize_client_types(state: ClientTypesState) -> Optional[LineItem]:
    # A label that never got its count is kept with zero
    if state.pending:
        return LineItem(state.pending, 0)
    return None


def parse_visit_frequency_line(line: str, state: Any = None) -> Tuple[Optional[LineItem], Any]:
    m = VISIT_FREQUENCY_ITEM_RE.match(line)
    if not m:
        return None, state
    return LineItem(m.group(2).strip(), int(m.group(3))), state


def parse_services_line(line: str, state: Any = None) -> Tuple[Optional[LineItem], Any]:
    m = SERVICE_ITEM_RE.match(line)
    if not m:
        return None, state
    return LineItem(m.group(1).strip(), int(m.group(2))), state


class ServiceSummaryParser(ReportParser):
    """Service summary: five fixed numbered sections"""

    report_type = ReportType.SERVICE_SUMMARY

    CLIENT_TYPES_RE = re.compile(r'^1\.\s+Client types$', re.IGNORECASE)
    VISIT_FREQUENCY_RE = re.compile(r'^2\.\s+Client visit frequency', re.IGNORECASE)
    SERVICES_RE = re.compile(r'^3\.\s+Services', re.IGNORECASE)
    VOLUNTEER_HOURS_RE = re.compile(r'^4\.\s+Volunteer hours$', re.IGNORECASE)
    OPERATING_DAYS_RE = re.compile(r'^5\.\s+Operating days$', re.IGNORECASE)
    BOUNDARY_RE = re.compile(r'^\d+\.\s+')
    HOURS_VALUE_RE = re.compile(r'^([\d.]+)\s*$')
    DAYS_VALUE_RE = re.compile(r'^(\d+)\s*$')

    def new_result(self) -> Dict[str, Any]:
        result = super().new_result()
        result['volunteer_hours'] = None
        result['operating_days'] = None
        return result

    def parse_header(self, line: str) -> Optional[SectionHeader]:
        if self.CLIENT_TYPES_RE.match(line):
            return SectionHeader(
                title='Client types',
                line_grammar=parse_client_types_line,
                grammar_state=ClientTypesState(),
                finalize=finalize_client_types,
            )
        if self.VISIT_FREQUENCY_RE.match(line):
            return SectionHeader(title='Client visit frequency', line_grammar=parse_visit_frequency_line)
        if self.SERVICES_RE.match(line):
            return SectionHeader(title='Services', line_grammar=parse_services_line)
        return None

    def boundary_test(self, line: str) -> bool:
        return bool(self.BOUNDARY_RE.match(line))

    def handle_line(self, lines: List[str], index: int, result: Dict[str, Any]) -> int:
        line = lines[index]
        has_next = index + 1 < len(lines)

        if self.VOLUNTEER_HOURS_RE.match(line) and has_next:
            m = self.HOURS_VALUE_RE.match(lines[index + 1])
            if not m:
                return index
            try:
                result['volunteer_hours'] = float(m.group(1))
            except ValueError:
                logger.warning(f"Dropping malformed volunteer hours value: {m.group(1)!r}")
            return index + 1

        if self.OPERATING_DAYS_RE.match(line) and has_next:
            m = self.DAYS_VALUE_RE.match(lines[index + 1])
            if not m:
                return index
            result['operating_days'] = int(m.group(1))
            return index + 1

        return super().handle_line(lines, index, result)


PARSERS = {
    ReportType.PANTRY_STATS: PantryStatsParser,
    ReportType.PROGRAM_STATS: ProgramStatsParser,
    ReportType.SERVICE_SUMMARY: ServiceSummaryParser,
}


def get_parser(report_type: ReportType, normalizer: Optional[TextNormalizer] = None) -> ReportParser:
    """
    Get the parser for a detected report type

    Raises:
        ValueError: If there is no parser for report_type (e.g. UNKNOWN)
    """
    parser_class = PARSERS.get(ReportType(report_type))
    if parser_class is None:
        raise ValueError(f"No parser for report type: {report_type}")
    return parser_class(normalizer)


def parse_pantry_stats(text: str) -> Dict[str, Any]:
    """Parse Pantry Statistical Report text"""
    return PantryStatsParser().parse(text)


def parse_program_stats(text: str) -> Dict[str, Any]:
    """Parse Program Statistics report text"""
    return ProgramStatsParser().parse(text)


def parse_service_summary(text: str) -> Dict[str, Any]:
    """Parse Service summary report text"""
    return ServiceSummaryParser().parse(text)
