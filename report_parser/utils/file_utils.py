#!/usr/bin/env python3
"""
File helpers for the batch commands
"""

import logging
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)


def crawl_directory(directory: Path) -> List[Path]:
    """
    Return every file below a directory, recursing into subdirectories

    Args:
        directory: Directory to crawl

    Returns:
        Sorted list of file paths
    """
    directory = Path(directory)
    files = []
    for child in sorted(directory.iterdir()):
        if child.is_dir():
            logger.debug(f"Crawling {child}")
            files.extend(crawl_directory(child))
        else:
            files.append(child)
    return files


def mirror_path(file_path: Path, input_dir: Path, output_dir: Path, suffix: str) -> Path:
    """Map a file below input_dir to the same relative path below output_dir with a new suffix"""
    rel_path = Path(file_path).relative_to(input_dir)
    return Path(output_dir) / rel_path.with_suffix(suffix)


def write_file_with_mkdir(path: Path, data: Union[str, bytes]) -> None:
    """Write a file, creating its directory if it doesn't exist"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, bytes):
        path.write_bytes(data)
    else:
        path.write_text(data, encoding='utf-8')
