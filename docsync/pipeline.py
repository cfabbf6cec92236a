"""Reference page generation pipeline: discover, extract, emit, write."""

from __future__ import annotations

from pathlib import Path

from .emitters import MarkdownEmitter
from .extractors import JavadocExtractor
from .logging import get_logger
from .models import FileFailure, SourceUnit, SyncResult
from .source_scanner import SourceScanner


class SyncError(RuntimeError):
    """Raised when a run cannot proceed at all (unusable source or output root)."""


def output_path_for(output_root: Path, unit: SourceUnit, extension: str = ".md") -> Path:
    """Map a unit to ``<output_root>/<package as dirs>/<Name><extension>``."""
    target_dir = output_root.joinpath(*unit.package_id.split(".")) if unit.package_id else output_root
    return target_dir / f"{unit.name}{extension}"


class SyncPipeline:
    """Runs the reference pipeline over a source tree."""

    def __init__(
        self,
        scanner: SourceScanner | None = None,
        extractor: JavadocExtractor | None = None,
        emitter: MarkdownEmitter | None = None,
    ) -> None:
        self.scanner = scanner or SourceScanner()
        self.extractor = extractor or JavadocExtractor()
        self.emitter = emitter or MarkdownEmitter()
        self.logger = get_logger("pipeline")

    def run(self, source_root: Path | str, output_root: Path | str) -> SyncResult:
        """Regenerate every reference page; per-file failures never abort the run."""
        source_path = Path(source_root).expanduser().resolve()
        output_path = Path(output_root).expanduser().resolve()
        self.logger.info("Syncing reference pages from %s to %s", source_path, output_path)

        try:
            output_path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SyncError(f"Cannot create output directory {output_path}: {exc}") from exc

        try:
            files = self.scanner.scan(source_path)
        except OSError as exc:
            raise SyncError(str(exc)) from exc

        result = SyncResult()
        for path in files:
            try:
                unit = self.extractor.extract_file(path)
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.warning("Skipping unreadable source %s: %s", path, exc)
                result.failures.append(FileFailure(path=path, stage="read", reason=str(exc)))
                continue

            if unit is None:
                self.logger.debug("No type declaration found in %s", path)
                result.skipped.append(path)
                continue

            target = output_path_for(output_path, unit, self.emitter.extension)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(self.emitter.render_text(unit), encoding="utf-8")
            except OSError as exc:
                self.logger.warning("Failed to write %s: %s", target, exc)
                result.failures.append(FileFailure(path=path, stage="write", reason=str(exc)))
                continue

            self.logger.debug("Wrote %s (%d members)", target, len(unit.members))
            result.units.append(unit)
            result.written.append(target)

        self.logger.info(
            "Generated %d reference pages (%d skipped, %d failed)",
            result.generated,
            len(result.skipped),
            len(result.failures),
        )
        return result


__all__ = ["SyncError", "SyncPipeline", "output_path_for"]
