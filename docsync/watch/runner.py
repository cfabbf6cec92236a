"""Pipeline runners launched by the watch controller."""

from __future__ import annotations

import subprocess
import sys
import threading
from pathlib import Path
from typing import Callable, List, Optional, Protocol

from ..logging import get_logger
from ..pipeline import SyncError, SyncPipeline

ExitCallback = Callable[[int], None]

logger = get_logger("watch.runner")


class PipelineRunner(Protocol):
    """Starts one pipeline run and reports its exit status through ``on_exit``."""

    def launch(self, on_exit: ExitCallback) -> None: ...


class SubprocessPipelineRunner:
    """Runs ``docsync sync`` in a child process so extraction crashes stay isolated."""

    def __init__(
        self,
        source_root: Path,
        output_root: Path,
        *,
        config_path: Optional[Path] = None,
        verbose: bool = False,
        cwd: Optional[Path] = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ) -> None:
        self.source_root = source_root
        self.output_root = output_root
        self.config_path = config_path
        self.verbose = verbose
        self.cwd = cwd
        self._popen = popen

    def command(self) -> List[str]:
        args = [sys.executable, "-m", "docsync.cli"]
        if self.verbose:
            args.append("--verbose")
        args.extend(["sync", "--source", str(self.source_root), "--output", str(self.output_root)])
        if self.config_path is not None:
            args.extend(["--config", str(self.config_path)])
        return args

    def launch(self, on_exit: ExitCallback) -> None:
        """Spawn the child and report its return code from a waiter thread.

        Raises OSError when the interpreter cannot be spawned.
        """
        command = self.command()
        logger.debug("Launching pipeline: %s", " ".join(command))
        process = self._popen(command, cwd=str(self.cwd) if self.cwd else None)

        def _wait() -> None:
            on_exit(process.wait())

        thread = threading.Thread(target=_wait, name="docsync-pipeline-wait", daemon=True)
        thread.start()


class InProcessPipelineRunner:
    """Calls SyncPipeline directly; exit status 0 on success, 1 on SyncError."""

    def __init__(
        self,
        source_root: Path,
        output_root: Path,
        pipeline: SyncPipeline | None = None,
    ) -> None:
        self.source_root = source_root
        self.output_root = output_root
        self.pipeline = pipeline or SyncPipeline()

    def launch(self, on_exit: ExitCallback) -> None:
        try:
            self.pipeline.run(self.source_root, self.output_root)
        except SyncError as exc:
            logger.error("Pipeline run failed: %s", exc)
            on_exit(1)
            return
        on_exit(0)


__all__ = [
    "ExitCallback",
    "InProcessPipelineRunner",
    "PipelineRunner",
    "SubprocessPipelineRunner",
]
