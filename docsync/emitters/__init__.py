"""Document emitters for extracted source units."""

from __future__ import annotations

from .markdown import MarkdownEmitter, escape_markup

__all__ = ["MarkdownEmitter", "escape_markup"]
