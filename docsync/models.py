"""Core data models shared across docsync components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

TYPE_KINDS = ("class", "interface", "enum", "record")


@dataclass
class MemberSignature:
    """An accessible method declaration found after the type header."""

    name: str
    summary: str
    parameter_text: str


@dataclass
class SourceUnit:
    """The principal type declared by one source file."""

    package_id: str
    kind: str
    name: str
    summary: str = ""
    members: List[MemberSignature] = field(default_factory=list)

    @property
    def fully_qualified_name(self) -> str:
        if self.package_id:
            return f"{self.package_id}.{self.name}"
        return self.name


@dataclass
class OutputDocument:
    """Reference page: front-matter block followed by a Markdown body."""

    front_matter: Dict[str, str]
    body: str

    def render(self) -> str:
        lines = ["---"]
        for key, value in self.front_matter.items():
            lines.append(f"{key}: {value}")
        lines.append("---")
        return "\n".join(lines) + "\n\n" + self.body


@dataclass
class FileFailure:
    """A source file that could not be read or whose page could not be written."""

    path: Path
    stage: str
    reason: str


@dataclass
class SyncResult:
    """Outcome of one pipeline run."""

    written: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failures: List[FileFailure] = field(default_factory=list)
    units: List[SourceUnit] = field(default_factory=list)

    @property
    def generated(self) -> int:
        return len(self.written)
