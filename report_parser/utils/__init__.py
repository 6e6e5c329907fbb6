"""
Report Parser Utilities Module

Contains small helper modules for PDF text extraction and file handling.
"""

from .file_utils import crawl_directory, mirror_path, write_file_with_mkdir
from .text_extractor import TextExtractor, TextExtractionError

__all__ = ['crawl_directory', 'mirror_path', 'write_file_with_mkdir', 'TextExtractor', 'TextExtractionError']
