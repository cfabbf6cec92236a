"""Javadoc-to-Markdown reference page generator with a live-reload watcher."""

from __future__ import annotations

from .models import MemberSignature, OutputDocument, SourceUnit, SyncResult
from .pipeline import SyncError, SyncPipeline, output_path_for

__version__ = "0.1.0"

__all__ = [
    "MemberSignature",
    "OutputDocument",
    "SourceUnit",
    "SyncError",
    "SyncPipeline",
    "SyncResult",
    "output_path_for",
]
