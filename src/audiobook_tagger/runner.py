"""Running external programs (ffmpeg, ffprobe) behind a replaceable interface."""

import logging
import shlex
import subprocess
from dataclasses import dataclass
from typing import Protocol

from audiobook_tagger.errors import FileIOError, ToolNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of an external program run."""

    returncode: int | None  # None when the process was killed by a signal
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class ProcessRunner(Protocol):
    """Anything that can run a program with arguments and capture its output."""

    def run(self, program: str, args: list[str]) -> ProcessResult:
        """
        Run program with args and wait for it to finish.

        Raises:
            ToolNotFoundError: If program does not exist.
            FileIOError: If the program could not be started for another reason.
        """
        ...


class SubprocessRunner:
    """ProcessRunner backed by subprocess.run."""

    def run(self, program: str, args: list[str]) -> ProcessResult:
        cmd = [program, *args]
        logger.debug("Running: %s", shlex.join(cmd))

        try:
            result = subprocess.run(
                cmd,
                check=False,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(program) from e
        except OSError as e:
            raise FileIOError(f"Could not run {program}: {e}", path=program) from e

        # Negative return codes mean the process was terminated by a signal
        returncode = result.returncode if result.returncode >= 0 else None
        return ProcessResult(returncode=returncode, stdout=result.stdout, stderr=result.stderr)
