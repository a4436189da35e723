"""Checking that the configured ffmpeg and ffprobe executables are usable."""

import re
import shutil
import subprocess
from dataclasses import dataclass

INSTALL_HINT = (
    "ffprobe ships with ffmpeg. Install ffmpeg with your package manager "
    "(apt install ffmpeg, brew install ffmpeg, choco install ffmpeg) or from "
    "https://ffmpeg.org/download.html, or point --ffmpeg-path/--ffprobe-path "
    "at existing executables."
)

# "ffmpeg version 6.1.1-3ubuntu5 Copyright (c) ..." -> "6.1.1-3ubuntu5"
_VERSION_RE = re.compile(r"^\S+ version (\S+)")


@dataclass
class DependencyStatus:
    """Where a configured tool resolved to, if anywhere."""

    name: str
    configured: str
    path: str | None = None
    version: str | None = None

    @property
    def found(self) -> bool:
        return self.path is not None

    def describe(self) -> list[str]:
        if not self.found:
            return [f"✗ {self.name}: NOT FOUND ({self.configured})"]
        lines = [f"✓ {self.name}: {self.path}"]
        if self.version:
            lines.append(f"  Version: {self.version}")
        return lines


@dataclass
class DependencyCheckResult:
    ffmpeg: DependencyStatus
    ffprobe: DependencyStatus

    @property
    def tools(self) -> tuple[DependencyStatus, DependencyStatus]:
        return self.ffmpeg, self.ffprobe

    @property
    def all_found(self) -> bool:
        return all(status.found for status in self.tools)

    @property
    def missing(self) -> list[str]:
        return [status.name for status in self.tools if not status.found]


def get_version(executable: str) -> str | None:
    """
    Ask an ffmpeg-family executable for its version number.

    Returns:
        The version token of the ``-version`` banner, the whole first line if
        it has an unexpected shape, or None if the executable failed to run.
    """
    try:
        result = subprocess.run(
            [executable, "-version"], check=False, capture_output=True, text=True, timeout=10
        )
    except (subprocess.TimeoutExpired, OSError):
        return None

    if result.returncode != 0 or not result.stdout:
        return None

    banner = result.stdout.splitlines()[0]
    match = _VERSION_RE.match(banner)
    return match.group(1) if match else banner


def check_dependency(name: str, configured: str) -> DependencyStatus:
    """Resolve a configured executable name or path through PATH."""
    path = shutil.which(configured)
    if path is None:
        return DependencyStatus(name=name, configured=configured)
    return DependencyStatus(
        name=name, configured=configured, path=path, version=get_version(path)
    )


def check_dependencies(
    ffmpeg_path: str = "ffmpeg", ffprobe_path: str = "ffprobe"
) -> DependencyCheckResult:
    return DependencyCheckResult(
        ffmpeg=check_dependency("ffmpeg", ffmpeg_path),
        ffprobe=check_dependency("ffprobe", ffprobe_path),
    )


def format_dependency_check(result: DependencyCheckResult) -> str:
    """Describe each tool and, when something is missing, how to install it."""
    lines = [line for status in result.tools for line in status.describe()]

    if result.all_found:
        lines.append("ffmpeg and ffprobe are ready")
    else:
        lines.append(f"Missing: {', '.join(result.missing)}")
        lines.extend(["", INSTALL_HINT])

    return "\n".join(lines)
