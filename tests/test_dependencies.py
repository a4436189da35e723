"""Unit tests for the dependencies module."""

import subprocess
from unittest.mock import MagicMock, patch

from audiobook_tagger.dependencies import (
    INSTALL_HINT,
    DependencyCheckResult,
    DependencyStatus,
    check_dependencies,
    check_dependency,
    format_dependency_check,
    get_version,
)


def found(name: str, version: str | None = None) -> DependencyStatus:
    return DependencyStatus(
        name=name, configured=name, path=f"/usr/bin/{name}", version=version
    )


def missing(name: str) -> DependencyStatus:
    return DependencyStatus(name=name, configured=name)


class TestDependencyStatus:
    def test_found_when_resolved(self):
        assert found("ffmpeg").found
        assert not missing("ffmpeg").found

    def test_describe_found(self):
        lines = found("ffmpeg", "6.0").describe()
        assert lines == ["✓ ffmpeg: /usr/bin/ffmpeg", "  Version: 6.0"]

    def test_describe_missing_shows_configured_path(self):
        status = DependencyStatus(name="ffprobe", configured="/opt/ffprobe")
        assert status.describe() == ["✗ ffprobe: NOT FOUND (/opt/ffprobe)"]


class TestDependencyCheckResult:
    def test_all_found(self):
        result = DependencyCheckResult(ffmpeg=found("ffmpeg"), ffprobe=found("ffprobe"))
        assert result.all_found
        assert result.missing == []

    def test_ffprobe_missing(self):
        result = DependencyCheckResult(ffmpeg=found("ffmpeg"), ffprobe=missing("ffprobe"))
        assert not result.all_found
        assert result.missing == ["ffprobe"]

    def test_both_missing(self):
        result = DependencyCheckResult(ffmpeg=missing("ffmpeg"), ffprobe=missing("ffprobe"))
        assert result.missing == ["ffmpeg", "ffprobe"]


class TestGetVersion:
    """Tests for reading the -version banner."""

    @patch("subprocess.run")
    def test_version_number(self, mock_run):
        mock_run.return_value = MagicMock(
            returncode=0, stdout="ffmpeg version 6.1.1-3ubuntu5 Copyright (c)\nbuilt with gcc"
        )
        assert get_version("/usr/bin/ffmpeg") == "6.1.1-3ubuntu5"

    @patch("subprocess.run")
    def test_unexpected_banner(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="custom build\n")
        assert get_version("/usr/bin/ffmpeg") == "custom build"

    @patch("subprocess.run")
    def test_failure(self, mock_run):
        mock_run.return_value = MagicMock(returncode=1, stdout="")
        assert get_version("/usr/bin/ffmpeg") is None

    @patch("subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired("ffmpeg", 10)
        assert get_version("/usr/bin/ffmpeg") is None

    @patch("subprocess.run")
    def test_not_executable(self, mock_run):
        mock_run.side_effect = PermissionError("denied")
        assert get_version("/usr/bin/ffmpeg") is None


class TestCheckDependency:
    @patch("audiobook_tagger.dependencies.get_version")
    @patch("shutil.which")
    def test_dependency_found(self, mock_which, mock_version):
        mock_which.return_value = "/usr/bin/ffmpeg"
        mock_version.return_value = "6.0"

        status = check_dependency("ffmpeg", "ffmpeg")

        assert status.found
        assert status.path == "/usr/bin/ffmpeg"
        assert status.version == "6.0"

    @patch("shutil.which")
    def test_dependency_not_found(self, mock_which):
        mock_which.return_value = None

        status = check_dependency("ffprobe", "/opt/ffprobe")

        assert not status.found
        assert status.configured == "/opt/ffprobe"

    @patch("audiobook_tagger.dependencies.check_dependency")
    def test_configured_paths_are_used(self, mock_check):
        mock_check.side_effect = lambda name, configured: missing(configured)

        result = check_dependencies("/a/ffmpeg", "/b/ffprobe")

        assert result.ffmpeg.name == "/a/ffmpeg"
        assert result.ffprobe.name == "/b/ffprobe"


class TestFormatDependencyCheck:
    def test_all_found(self):
        result = DependencyCheckResult(ffmpeg=found("ffmpeg"), ffprobe=found("ffprobe"))
        output = format_dependency_check(result)

        assert "✓ ffmpeg: /usr/bin/ffmpeg" in output
        assert "ready" in output
        assert INSTALL_HINT not in output

    def test_missing_shows_hint(self):
        result = DependencyCheckResult(ffmpeg=found("ffmpeg"), ffprobe=missing("ffprobe"))
        output = format_dependency_check(result)

        assert "✗ ffprobe: NOT FOUND" in output
        assert "Missing: ffprobe" in output
        assert output.endswith(INSTALL_HINT)
