"""Javadoc comment and declaration signature matching.

These helpers work on raw file text with regular expressions. They do not
tokenize or parse Java: nested parentheses inside parameter lists,
annotations with nested arguments, and generic types containing spaces can
all cause a declaration to be missed or its parameter text to be truncated.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional

# A doc comment body never spans "*/", so stacked comments bind to the
# declaration only through the nearest one.
_DOC_COMMENT = r"(?:/\*\*((?:(?!\*/)[\s\S])*)\*/\s*)?"
_ANNOTATIONS = r"(?:@(?!interface\b)[\w$.]+(?:\s*\([^)]*\))?\s*)*"
_TYPE_MODIFIERS = r"(?:(?:public|protected|private|abstract|final|static|sealed|non-sealed|strictfp)\s+)*"
_MEMBER_MODIFIERS = r"(?:(?:static|final|abstract|synchronized|default|native|strictfp)\s+)*"
_TYPE_PARAMETERS = r"(?:<[^<>{};]*(?:<[^<>{};]*>[^<>{};]*)*>\s*)?"
_IDENTIFIER = r"[A-Za-z_$][\w$]*"

PACKAGE_RE = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)

TYPE_HEADER_RE = re.compile(
    _DOC_COMMENT
    + _ANNOTATIONS
    + _TYPE_MODIFIERS
    + r"\b(class|interface|enum|record)\s+("
    + _IDENTIFIER
    + r")"
)

MEMBER_RE = re.compile(
    _DOC_COMMENT
    + _ANNOTATIONS
    + r"\b(?:public|protected)\s+"
    + _MEMBER_MODIFIERS
    + _TYPE_PARAMETERS
    + r"[\w$.<>\[\],?]+\s+("
    + _IDENTIFIER
    + r")\s*\(([^)]*)\)\s*(?:throws\s+[^{;]+)?\{"
)

_LEADING_STAR_RE = re.compile(r"^[ \t]*\*[ \t]?", re.MULTILINE)


@dataclass(frozen=True)
class TypeHeader:
    """Kind, name, and raw doc comment of a type declaration."""

    kind: str
    name: str
    doc: str
    end: int


@dataclass(frozen=True)
class MemberMatch:
    """Name, raw doc comment, and raw parameter list of a method declaration."""

    name: str
    doc: str
    parameters: str


def clean_doc_comment(raw: str) -> str:
    """Strip comment delimiters and per-line asterisks, then trim.

    Plain text without comment markers comes back unchanged apart from the
    outer trim, so applying this twice is the same as applying it once.
    """
    text = raw.strip()
    if text.startswith("/**"):
        text = text[3:]
    elif text.startswith("/*"):
        text = text[2:]
    if text.endswith("*/"):
        text = text[:-2]
    return _LEADING_STAR_RE.sub("", text).strip()


def find_package(text: str) -> tuple[str, int]:
    """Return the declared package and the offset just past its declaration."""
    match = PACKAGE_RE.search(text)
    if match is None:
        return "", 0
    return match.group(1), match.end()


def _inside_comment(text: str, pos: int) -> bool:
    line_start = text.rfind("\n", 0, pos) + 1
    if "//" in text[line_start:pos]:
        return True
    return text.rfind("/*", 0, pos) > text.rfind("*/", 0, pos)


def find_type_header(text: str, start: int = 0) -> Optional[TypeHeader]:
    """Return the first type header at or after ``start``.

    A kind keyword inside a line or block comment ("// Utility class for
    parsing") is not a declaration and is passed over.
    """
    for match in TYPE_HEADER_RE.finditer(text, start):
        if _inside_comment(text, match.start(2)):
            continue
        return TypeHeader(
            kind=match.group(2),
            name=match.group(3),
            doc=match.group(1) or "",
            end=match.end(),
        )
    return None


def iter_members(text: str, start: int = 0) -> Iterator[MemberMatch]:
    """Yield public/protected method declarations found at or after ``start``."""
    for match in MEMBER_RE.finditer(text, start):
        yield MemberMatch(
            name=match.group(2),
            doc=match.group(1) or "",
            parameters=match.group(3),
        )


__all__ = [
    "MemberMatch",
    "TypeHeader",
    "clean_doc_comment",
    "find_package",
    "find_type_header",
    "iter_members",
]
