"""Declaration extractors for Java sources."""

from __future__ import annotations

from .comments import clean_doc_comment
from .javadoc import JavadocExtractor

__all__ = ["JavadocExtractor", "clean_doc_comment"]
