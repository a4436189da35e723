"""
Exception hierarchy for audiobook-tagger.

Exception Hierarchy:
    TaggerError (base)
    ├── FileIOError - reading or writing a file failed
    ├── ToolNotFoundError - an external binary is missing
    │   ├── FfmpegNotFoundError
    │   └── FfprobeNotFoundError
    ├── TagError - ID3 tag could not be read or written
    ├── NoFilesFoundError - a pattern set matched nothing
    ├── InvalidPatternError - a glob pattern is malformed
    ├── MissingTemplateTokenError - naming scheme lacks its substitution token
    ├── DurationReadError - audio duration could not be measured
    ├── ChapterReadError - ffprobe chapter output is missing or malformed
    ├── InterchangeEncodeError - chapters could not be written as TOML
    ├── InterchangeDecodeError - TOML chapter document is invalid
    └── MuxError - ffmpeg exited unsuccessfully
"""

from pathlib import Path
from typing import Any

# Reported in place of an exit code when the process was killed by a signal.
ABNORMAL_EXIT_CODE = -1


class TaggerError(Exception):
    """Base exception for all audiobook-tagger errors."""

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Optional structured details for logging.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class FileIOError(TaggerError):
    """Reading or writing a file failed."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        details = {"path": str(path)} if path else {}
        super().__init__(message, details=details)
        self.path = path


# =============================================================================
# External tools
# =============================================================================


class ToolNotFoundError(TaggerError):
    """An external executable could not be spawned because it does not exist."""

    def __init__(self, tool_path: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Could not find executable: {tool_path}",
            details={"tool_path": tool_path},
        )
        self.tool_path = tool_path


class FfmpegNotFoundError(ToolNotFoundError):
    """ffmpeg is not installed at the configured path."""

    def __init__(self, tool_path: str) -> None:
        super().__init__(tool_path, f"Could not find ffmpeg executable: {tool_path}")


class FfprobeNotFoundError(ToolNotFoundError):
    """ffprobe is not installed at the configured path."""

    def __init__(self, tool_path: str) -> None:
        super().__init__(
            tool_path,
            f"Could not find ffprobe executable: {tool_path}. "
            "It is installed together with ffmpeg",
        )


class MuxError(TaggerError):
    """ffmpeg finished with a non-zero or unknown exit status."""

    def __init__(self, returncode: int | None, stderr: str = "") -> None:
        code = ABNORMAL_EXIT_CODE if returncode is None else returncode
        if returncode is None:
            message = "ffmpeg terminated abnormally"
        else:
            message = f"ffmpeg encountered an error: exit code {code}"
        super().__init__(message, details={"returncode": code, "stderr": stderr})
        self.returncode = code
        self.stderr = stderr


# =============================================================================
# Tags, files and patterns
# =============================================================================


class TagError(TaggerError):
    """An ID3 tag could not be read or written."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        details = {"path": str(path)} if path else {}
        super().__init__(message, details=details)
        self.path = path


class NoFilesFoundError(TaggerError):
    """No files matched the provided patterns."""

    def __init__(self, patterns: list[str] | None = None) -> None:
        super().__init__(
            "No files matched the provided pattern",
            details={"patterns": patterns or []},
        )


class InvalidPatternError(TaggerError):
    """A wildcard pattern could not be parsed."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(
            f"Invalid wildcard pattern {pattern!r}: {reason}",
            details={"pattern": pattern},
        )
        self.pattern = pattern


class MissingTemplateTokenError(TaggerError):
    """A naming scheme does not contain the required substitution token."""

    def __init__(self, token: str) -> None:
        super().__init__(
            f"The naming scheme did not contain the format specifier: {token}",
            details={"token": token},
        )
        self.token = token


class DurationReadError(TaggerError):
    """The duration of an audio file could not be determined."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(
            f"Could not read duration of {path}: {reason}", details={"path": str(path)}
        )
        self.path = path


# =============================================================================
# Chapter formats
# =============================================================================


class ChapterReadError(TaggerError):
    """The chapters of a media file could not be read from ffprobe output."""

    def __init__(self, message: str, *, errors: list[str] | None = None) -> None:
        super().__init__(message, details={"errors": errors or []})
        self.errors = errors or []


class InterchangeEncodeError(TaggerError):
    """A chapter list could not be serialized to TOML."""

    pass


class InterchangeDecodeError(TaggerError):
    """A TOML chapter document could not be parsed or validated."""

    def __init__(self, message: str, *, errors: list[str] | None = None) -> None:
        super().__init__(message, details={"errors": errors or []})
        self.errors = errors or []
