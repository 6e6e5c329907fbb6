#!/usr/bin/env python3
"""
Configuration for the Service Report Parser
Edit these values or override them with environment variables
"""

import os
from pathlib import Path

# Rules Directory
# YAML rule files used by the parser:
# - shared.yaml: text cleanup patterns, consolidation settings
# - 10_report_detection.yaml: ordered report type markers
# Override with REPORTS_RULES_DIR to point at a customised copy
RULES_DIR = Path(os.environ.get('REPORTS_RULES_DIR', Path(__file__).parent / 'report_rules'))

# Logging
DEFAULT_LOG_LEVEL = os.environ.get('REPORTS_LOG_LEVEL', 'INFO')
DEFAULT_LOG_DIR = Path('logs')
LOG_FILE_NAME = 'service_report_parser.log'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Batch parsing (parse-reports)
# Files are independent, so parsing can fan out across threads
DEFAULT_MAX_WORKERS = 4

# Output file names (consolidate-reports)
CONSOLIDATED_JSON = 'consolidated.json'
CONSOLIDATED_CSV = 'consolidated.csv'

# Financial CSV suffixes (consolidate-financials)
EXPENSES_SUFFIX = 'expenses.csv'
INCOME_SUFFIX = 'income.csv'
