#!/usr/bin/env python3
"""
Text Extractor - Extract page text directly from report PDFs
"""

import logging
from pathlib import Path
from typing import List, Optional

import fitz  # PyMuPDF
import PyPDF2

logger = logging.getLogger(__name__)


class TextExtractionError(Exception):
    """Raised when no extraction method could read a PDF"""


class TextExtractor:
    """Extract text from PDF files page by page"""

    def __init__(self, threshold: int = 20):
        """
        Initialize text extractor

        Args:
            threshold: Minimum character count to consider extracted text valid (default: 20)
        """
        self.threshold = threshold

    def extract_pages(self, pdf_path: Path) -> List[str]:
        """
        Extract the text of every page of a PDF

        Tries:
        1. PyMuPDF (fitz) - best for structured PDFs
        2. PyPDF2 - fallback method

        Args:
            pdf_path: Path to PDF file

        Returns:
            List of page texts

        Raises:
            TextExtractionError: If both methods fail
        """
        pages: Optional[List[str]] = None

        # Method 1: Try PyMuPDF (best for structured PDFs)
        try:
            pages = self._extract_with_mupdf(pdf_path)
            if self._is_valid_text(pages):
                logger.debug(f"Extracted {len(pages)} pages using PyMuPDF")
                return pages
        except Exception as e:
            logger.debug(f"PyMuPDF extraction failed for {pdf_path}: {e}")

        # Method 2: Try PyPDF2
        try:
            pdf_pages = self._extract_with_pypdf2(pdf_path)
            if self._is_valid_text(pdf_pages) or not pages:
                logger.debug(f"Extracted {len(pdf_pages)} pages using PyPDF2")
                return pdf_pages
        except Exception as e:
            logger.debug(f"PyPDF2 extraction failed for {pdf_path}: {e}")

        if pages is None:
            raise TextExtractionError(f"Could not extract text from {pdf_path}")

        # Return whatever we got, even if below threshold
        return pages

    def extract_text(self, pdf_path: Path) -> str:
        """Extract the full text of a PDF, pages joined by newlines"""
        return '\n'.join(self.extract_pages(pdf_path))

    def _extract_with_mupdf(self, pdf_path: Path) -> List[str]:
        """Extract page texts using PyMuPDF (fitz)"""
        doc = fitz.open(pdf_path)
        try:
            return [page.get_text() for page in doc]
        finally:
            doc.close()

    def _extract_with_pypdf2(self, pdf_path: Path) -> List[str]:
        """Extract page texts using PyPDF2"""
        with open(pdf_path, 'rb') as file:
            pdf_reader = PyPDF2.PdfReader(file)
            return [page.extract_text() or '' for page in pdf_reader.pages]

    def _is_valid_text(self, pages: Optional[List[str]]) -> bool:
        """Check that extracted pages hold some readable text"""
        if not pages:
            return False

        cleaned = ''.join(pages).strip()
        if len(cleaned) < self.threshold:
            return False

        # At least 20% should be alphanumeric
        alphanumeric_count = sum(1 for c in cleaned if c.isalnum())
        alphanumeric_ratio = alphanumeric_count / len(cleaned)
        if alphanumeric_ratio < 0.2:
            logger.debug(f"Text appears to be mostly symbols (ratio: {alphanumeric_ratio:.2f})")
            return False

        return True
