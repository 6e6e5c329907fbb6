#!/usr/bin/env python3
"""
Financials - Consolidate the yearly expense and income CSV exports

The input folder holds one file ending in "Expenses.csv" and one ending in
"Income.csv", each with Year, Category, Source and Amount columns. Both are
combined into a single JSON document for the dashboard.
"""

import re
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from .config import EXPENSES_SUFFIX, INCOME_SUFFIX
from .utils.file_utils import write_file_with_mkdir

logger = logging.getLogger(__name__)

YEAR_RE = re.compile(r'^\s*(\d+)')
AMOUNT_STRIP_RE = re.compile(r'[,\s$]')


def parse_amount(value: Any) -> float:
    """
    Parse a currency amount such as " 1,628.14 " or "$43,533.10"

    Empty or invalid values return 0.
    """
    if value is None or str(value).strip() == '':
        return 0.0
    cleaned = AMOUNT_STRIP_RE.sub('', str(value))
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def parse_year(value: Any) -> Optional[int]:
    m = YEAR_RE.match(str(value)) if value is not None else None
    return int(m.group(1)) if m else None


def read_financial_csv(csv_path: Path) -> List[Dict[str, Any]]:
    """
    Read a financial CSV export

    Rows without a usable year are skipped.

    Args:
        csv_path: Path to the CSV file

    Returns:
        List of {year, category, source, amount} rows
    """
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False, skipinitialspace=True)
    df.columns = [str(c).strip() for c in df.columns]

    rows = []
    for record in df.to_dict(orient='records'):
        year = parse_year(record.get('Year'))
        if year is None:
            continue
        rows.append({
            'year': year,
            'category': str(record.get('Category', '')).strip(),
            'source': str(record.get('Source', '')).strip(),
            'amount': parse_amount(record.get('Amount')),
        })

    logger.debug(f"Read {len(rows)} rows from {csv_path}")
    return rows


def _find_file(input_folder: Path, suffix: str) -> Optional[Path]:
    for path in sorted(Path(input_folder).iterdir()):
        if path.is_file() and path.name.lower().endswith(suffix):
            return path
    return None


def build_financials(input_folder: Path) -> Dict[str, Any]:
    """
    Combine the expense and income CSVs of a folder

    Raises:
        FileNotFoundError: If either CSV is missing
    """
    expenses_file = _find_file(input_folder, EXPENSES_SUFFIX)
    income_file = _find_file(input_folder, INCOME_SUFFIX)

    if expenses_file is None:
        raise FileNotFoundError(
            f'No Expenses CSV found in {input_folder}. Expected a file ending with "Expenses.csv"'
        )
    if income_file is None:
        raise FileNotFoundError(
            f'No Income CSV found in {input_folder}. Expected a file ending with "Income.csv"'
        )

    expenses = [{**row, 'type': 'expense'} for row in read_financial_csv(expenses_file)]
    income = [{**row, 'type': 'income'} for row in read_financial_csv(income_file)]
    years = sorted({row['year'] for row in expenses + income})

    return {'expenses': expenses, 'income': income, 'years': years}


def consolidate_financials(input_folder: Path, output_path: Path) -> Dict[str, Any]:
    """
    Consolidate financial CSV files into a single JSON file

    Args:
        input_folder: Folder containing the Expenses and Income CSV files
        output_path: Path for financials.json

    Returns:
        The consolidated financial data
    """
    result = build_financials(Path(input_folder))
    write_file_with_mkdir(Path(output_path), json.dumps(result, indent=2))
    logger.info(f"Wrote financial data to {output_path}")
    return result
