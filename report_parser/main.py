#!/usr/bin/env python3
"""
Service Report Parser - Command line entry point

Commands:
    to-text                 Extract the text of every report PDF
    parse-reports           Parse every report PDF into a JSON file
    consolidate-reports     Merge parsed report JSON files into one record per month
    consolidate-financials  Combine the Expenses and Income CSV exports

The parsing steps themselves are pure; this module owns all file access.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed

import pandas as pd

from .config import (
    CONSOLIDATED_CSV,
    CONSOLIDATED_JSON,
    DEFAULT_LOG_DIR,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_WORKERS,
    RULES_DIR,
)
from .financials import consolidate_financials
from .key_cleanup import consolidate_reports
from .logger import setup_logger
from .parse_report import parse_report
from .report_detector import ReportDetector
from .report_text import TextNormalizer
from .rule_loader import RuleLoader
from .utils.file_utils import crawl_directory, mirror_path, write_file_with_mkdir
from .utils.text_extractor import TextExtractionError, TextExtractor

logger = logging.getLogger(__name__)


def _pdf_files(input_dir: Path) -> List[Path]:
    pdf_files = []
    for file_path in crawl_directory(input_dir):
        if file_path.suffix.lower() != '.pdf':
            logger.warning(f"Skipping non-PDF file: {file_path}")
            continue
        pdf_files.append(file_path)
    return pdf_files


def extract_texts(input_dir: Path, output_dir: Path, extractor: Optional[TextExtractor] = None) -> int:
    """
    Save the extracted text of every PDF below input_dir as a .txt file

    Returns:
        Number of text files written
    """
    extractor = extractor or TextExtractor()
    written = 0
    for file_path in _pdf_files(input_dir):
        logger.info(f"Extracting text from {file_path}")
        try:
            text = extractor.extract_text(file_path)
        except TextExtractionError as e:
            logger.error(str(e))
            continue
        target_path = mirror_path(file_path, input_dir, output_dir, '.txt')
        logger.info(f"Saving text to {target_path}")
        write_file_with_mkdir(target_path, text)
        written += 1
    return written


def parse_report_file(
    file_path: Path,
    extractor: TextExtractor,
    detector: ReportDetector,
    normalizer: TextNormalizer,
) -> Optional[Dict[str, Any]]:
    """Extract and parse one report PDF; None when it cannot be read or identified"""
    logger.info(f"Parsing report {file_path}")
    try:
        pages = extractor.extract_pages(file_path)
    except TextExtractionError as e:
        logger.error(str(e))
        return None

    report = parse_report(pages, detector=detector, normalizer=normalizer)
    if report is None:
        logger.warning(f"Skipping report {file_path} because it could not be identified")
    return report


def parse_reports(
    input_dir: Path,
    output_dir: Path,
    rules_dir: Path = RULES_DIR,
    use_threads: bool = False,
    max_workers: int = DEFAULT_MAX_WORKERS,
    extractor: Optional[TextExtractor] = None,
) -> Dict[Path, Dict[str, Any]]:
    """
    Parse every report PDF below input_dir into a JSON file below output_dir

    Args:
        input_dir: Folder containing the report PDFs
        output_dir: Folder for the parsed JSON files (same relative layout)
        rules_dir: Directory containing rule YAML files
        use_threads: If True, parse files in parallel using ThreadPoolExecutor
        max_workers: Maximum number of parallel workers

    Returns:
        Mapping of written JSON path to parsed report
    """
    rule_loader = RuleLoader(rules_dir)
    detector = ReportDetector.from_rule_loader(rule_loader)
    normalizer = TextNormalizer.from_rule_loader(rule_loader)
    extractor = extractor or TextExtractor()

    pdf_files = _pdf_files(input_dir)
    logger.info(f"Found {len(pdf_files)} PDF files")

    def process_file(file_path: Path):
        return file_path, parse_report_file(file_path, extractor, detector, normalizer)

    results = []
    # Each file is parsed independently, no shared mutable state
    if use_threads and len(pdf_files) > 1:
        logger.info(f"Using parallel processing with {max_workers} workers for {len(pdf_files)} files")
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(process_file, file_path): file_path for file_path in pdf_files}
            for future in as_completed(futures):
                results.append(future.result())
    else:
        results = [process_file(file_path) for file_path in pdf_files]

    written = {}
    for file_path, report in sorted(results, key=lambda r: r[0]):
        if report is None:
            continue
        target_path = mirror_path(file_path, input_dir, output_dir, '.json')
        write_file_with_mkdir(target_path, json.dumps(report, indent=2))
        written[target_path] = report

    logger.info(f"Parsed {len(written)} of {len(pdf_files)} reports")
    return written


def load_reports(input_dir: Path) -> List[Dict[str, Any]]:
    """Read every parsed report JSON file below input_dir"""
    reports = []
    for file_path in crawl_directory(input_dir):
        if file_path.suffix.lower() != '.json':
            continue
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                report = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Skipping unreadable report {file_path}: {e}")
            continue
        # consolidated.json holds a list and may sit below the input folder
        if not isinstance(report, dict):
            logger.warning(f"Skipping {file_path}: expected a parsed report object, got {type(report).__name__}")
            continue
        reports.append(report)
    return reports


def write_consolidated_csv(reports: List[Dict[str, Any]], csv_path: Path) -> None:
    """Write consolidated reports as CSV, one row per month, nested keys as dotted columns"""
    df = pd.json_normalize(reports, sep='.')
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(csv_path, index=False)


def consolidate_report_files(input_dir: Path, output_dir: Path, rules_dir: Path = RULES_DIR) -> List[Dict[str, Any]]:
    """
    Consolidate every parsed report below input_dir

    Writes consolidated.json and consolidated.csv to output_dir.

    Returns:
        The consolidated reports
    """
    rule_loader = RuleLoader(rules_dir)
    skip_keys = rule_loader.get_consolidation_rules().get('skip_keys')

    reports = load_reports(input_dir)
    logger.info(f"Consolidating {len(reports)} reports")
    consolidated_reports = consolidate_reports(reports, skip_keys=skip_keys)

    output_dir = Path(output_dir)
    write_file_with_mkdir(output_dir / CONSOLIDATED_JSON, json.dumps(consolidated_reports, indent=2))

    csv_path = output_dir / CONSOLIDATED_CSV
    write_consolidated_csv(consolidated_reports, csv_path)
    logger.info(f"Finished writing data to: {csv_path}")
    return consolidated_reports


def build_arg_parser():
    import argparse

    parser = argparse.ArgumentParser(
        prog='service-report-parser',
        description='Parse monthly service report PDFs into structured data',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--log-level', default=DEFAULT_LOG_LEVEL, help='Logging level (default: %(default)s)')
    parser.add_argument('--log-dir', default=str(DEFAULT_LOG_DIR), help='Directory for log files (default: %(default)s)')
    parser.add_argument('--rules-dir', default=str(RULES_DIR), help='Directory containing rule YAML files')

    subparsers = parser.add_subparsers(dest='command', required=True)

    to_text = subparsers.add_parser('to-text', help='Extract the text of every report PDF')
    to_text.add_argument('-i', '--input', required=True, help='The folder containing the report PDFs')
    to_text.add_argument('-o', '--output', required=True, help='The folder to save the extracted text to')

    parse = subparsers.add_parser('parse-reports', help='Parse all reports in the input folder')
    parse.add_argument('-i', '--input', required=True, help='The folder containing the report PDFs')
    parse.add_argument('-o', '--output', required=True, help='The folder to save the extracted JSON to')
    parse.add_argument('--use-threads', action='store_true', help='Parse files in parallel (default: False)')
    parse.add_argument('--max-workers', type=int, default=DEFAULT_MAX_WORKERS, help='Parallel workers (default: %(default)s)')

    consolidate = subparsers.add_parser('consolidate-reports', help='Consolidate all reports in the input folder')
    consolidate.add_argument('-i', '--input', required=True, help='The folder containing the report JSON files')
    consolidate.add_argument('-o', '--output', required=True, help='The folder to save the consolidated JSON and CSV')

    financials = subparsers.add_parser('consolidate-financials', help='Combine the Expenses and Income CSV files')
    financials.add_argument('-i', '--input', required=True, help='The folder containing the financial CSV files')
    financials.add_argument('-o', '--output', required=True, help='Path for the financials JSON file')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for service-report-parser"""
    args = build_arg_parser().parse_args(argv)
    setup_logger(log_level=args.log_level, log_dir=Path(args.log_dir))

    input_path = Path(args.input)
    output_path = Path(args.output)
    rules_dir = Path(args.rules_dir)

    if args.command == 'to-text':
        extract_texts(input_path, output_path)
    elif args.command == 'parse-reports':
        parse_reports(input_path, output_path, rules_dir, use_threads=args.use_threads, max_workers=args.max_workers)
    elif args.command == 'consolidate-reports':
        consolidate_report_files(input_path, output_path, rules_dir)
    elif args.command == 'consolidate-financials':
        try:
            consolidate_financials(input_path, output_path)
        except FileNotFoundError as e:
            logger.error(str(e))
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
