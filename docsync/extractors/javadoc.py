"""Javadoc declaration extractor."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from ..models import MemberSignature, SourceUnit
from .comments import clean_doc_comment, find_package, find_type_header, iter_members


class JavadocExtractor:
    """Builds a SourceUnit from the first type declared in a Java file."""

    def extract_file(self, path: Path) -> Optional[SourceUnit]:
        """Read ``path`` as UTF-8 and extract it.

        Read and decode errors are left to the caller, which decides whether
        the failure is fatal for the run.
        """
        text = path.read_text(encoding="utf-8")
        return self.extract(text)

    def extract(self, text: str) -> Optional[SourceUnit]:
        """Return the file's principal type, or None when no header matches."""
        package_id, package_end = find_package(text)
        header = find_type_header(text, package_end)
        if header is None:
            return None

        members: List[MemberSignature] = []
        for match in iter_members(text, header.end):
            members.append(
                MemberSignature(
                    name=match.name,
                    summary=clean_doc_comment(match.doc),
                    parameter_text=match.parameters.strip(),
                )
            )

        return SourceUnit(
            package_id=package_id,
            kind=header.kind,
            name=header.name,
            summary=clean_doc_comment(header.doc),
            members=members,
        )


__all__ = ["JavadocExtractor"]
