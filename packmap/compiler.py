from __future__ import annotations

import logging
import subprocess
import time
from pathlib import Path
from typing import Optional, Protocol, Sequence

from .errors import CompilationError
from .metrics import observe_compile
from .settings import PackSettings


logger = logging.getLogger("packmap.compiler")


class Compiler(Protocol):
    def compile(self) -> None:
        ...


class CommandCompiler:
    """Runs the configured build command and waits for it to finish."""

    def __init__(self, argv: Sequence[str], cwd: Optional[Path] = None) -> None:
        if not argv:
            raise ValueError("compile command must not be empty")
        self.argv = list(argv)
        self.cwd = cwd

    @classmethod
    def from_settings(cls, settings: PackSettings) -> "CommandCompiler":
        return cls(settings.compile_argv())

    def compile(self) -> None:
        logger.info("Compiling: %s", " ".join(self.argv))
        t0 = time.perf_counter()
        proc = subprocess.run(
            self.argv,
            cwd=str(self.cwd) if self.cwd else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
        duration = time.perf_counter() - t0
        observe_compile(duration)
        if proc.returncode != 0:
            logger.error("Compilation failed after %.2fs (exit %s)", duration, proc.returncode)
            raise CompilationError(self.argv, proc.returncode, proc.stdout or "")
        logger.info("Compiled in %.2fs", duration, extra={"duration_s": duration})
