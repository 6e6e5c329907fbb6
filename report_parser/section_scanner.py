#!/usr/bin/env python3
"""
Section Scanner - Generic labeled-count section parsing

Consumes the data lines that follow a section header and collects
label -> count items until the next section header. The line grammar and
the boundary test are supplied by the report parser, so the same scanner
serves every report layout.

A line grammar is called as grammar(line, state) and returns
(item_or_None, new_state). The state is an explicit accumulator threaded
from line to line; grammars without multi-line handling simply hand the
state back unchanged.
"""

import re
import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)


class LineItem(NamedTuple):
    """One (label, count) row of a section"""
    label: str
    count: int


LineGrammar = Callable[[str, Any], Tuple[Optional[LineItem], Any]]
BoundaryTest = Callable[[str], bool]

COUNT_LABEL_RE = re.compile(r'^(\d+)\s+(.+)$')


def default_line_grammar(line: str, state: Any = None) -> Tuple[Optional[LineItem], Any]:
    """Parse a "<count> <label>" data line"""
    m = COUNT_LABEL_RE.match(line)
    if not m:
        return None, state
    return LineItem(m.group(2).strip(), int(m.group(1))), state


def scan_section(
    lines: List[str],
    header_index: int,
    sections: Dict[str, Dict],
    title: str,
    boundary_test: BoundaryTest,
    initial_item: Optional[LineItem] = None,
    line_grammar: LineGrammar = default_line_grammar,
    grammar_state: Any = None,
    finalize: Optional[Callable[[Any], Optional[LineItem]]] = None,
) -> int:
    """
    Consume data lines for one section and store it under sections[title]

    Scanning starts on the line after the header and stops before the first
    line for which boundary_test() is true; that line is left for the caller.

    Args:
        lines: All report lines
        header_index: Index of the section header line
        sections: Mapping that receives {"items": {...}} under title
        title: Section title
        boundary_test: Returns True when a line starts the next section
        initial_item: First row when it sits on the header line
        line_grammar: Data line parser, see module docstring
        grammar_state: Initial accumulator for line_grammar
        finalize: Called with the final state; may return one last item

    Returns:
        Index of the last line consumed
    """
    items: Dict[str, int] = {}
    if initial_item is not None:
        items[initial_item.label] = initial_item.count

    state = grammar_state
    last_index = len(lines) - 1
    for i in range(header_index + 1, len(lines)):
        line = lines[i]
        if boundary_test(line):
            last_index = i - 1
            break

        item, state = line_grammar(line, state)
        if item is not None:
            items[item.label] = item.count

    if finalize is not None:
        item = finalize(state)
        if item is not None:
            items[item.label] = item.count

    sections[title] = {'items': items}
    logger.debug(f"Section '{title}': {len(items)} items, lines {header_index + 1}-{last_index}")
    return last_index
