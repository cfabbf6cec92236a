"""Markdown reference page rendering."""

from __future__ import annotations

import re
from typing import Dict, List

from ..models import MemberSignature, OutputDocument, SourceUnit

_LINE_BREAK_RE = re.compile(r"\s*\n\s*")


def escape_markup(text: str) -> str:
    """Escape angle brackets so generic types are not read as HTML tags."""
    return text.replace("<", "&lt;").replace(">", "&gt;")


class MarkdownEmitter:
    """Renders a SourceUnit as a front-matter tagged Markdown page."""

    extension = ".md"
    members_heading = "### Methods"

    def render(self, unit: SourceUnit) -> OutputDocument:
        front_matter: Dict[str, str] = {
            "title": unit.name,
            "fqcn": unit.fully_qualified_name,
            "package": unit.package_id,
            "kind": unit.kind,
        }

        blocks: List[str] = []
        if unit.summary:
            blocks.append(unit.summary)
        blocks.append(f"## {unit.kind} {unit.name}")
        if unit.members:
            blocks.append(self.members_heading)
            blocks.append("\n".join(self._member_lines(member) for member in unit.members))

        return OutputDocument(front_matter=front_matter, body="\n\n".join(blocks) + "\n")

    def render_text(self, unit: SourceUnit) -> str:
        return self.render(unit).render()

    @staticmethod
    def _member_lines(member: MemberSignature) -> str:
        parameters = escape_markup(_LINE_BREAK_RE.sub(" ", member.parameter_text))
        lines = [f"- `{member.name}({parameters})`"]
        if member.summary:
            summary_lines = member.summary.splitlines()
            lines.append(f"  - {summary_lines[0]}")
            # continuation lines stay inside the sub-bullet
            lines.extend(f"    {line}" if line.strip() else "" for line in summary_lines[1:])
        return "\n".join(lines)


__all__ = ["MarkdownEmitter", "escape_markup"]
