"""Shared pytest fixtures and configuration."""

import json
import sys
from pathlib import Path

import pytest

# Ensure the package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from audiobook_tagger.models import Chapter, ChapterList, TagInfo  # noqa: E402
from tests.test_utils import FakeRunner  # noqa: E402


@pytest.fixture
def sample_chapters():
    """Create sample contiguous chapters for testing."""

    return [
        Chapter(title="Intro", start=0, end=60000),
        Chapter(title="Middle", start=60000, end=105000),
        Chapter(title="End", start=105000, end=135000),
    ]


@pytest.fixture
def sample_chapter_list(sample_chapters):
    """Create a sample chapter list for testing."""

    return ChapterList(title="Book", author="Author", chapters=sample_chapters)


@pytest.fixture
def probe_document():
    """ffprobe JSON with two chapters and no format section."""

    return json.dumps(
        {
            "chapters": [
                {"tags": {"title": "One"}, "start": 0, "end": 1000},
                {"tags": {"title": "Two"}, "start": 1000, "end": 2000},
            ]
        }
    )


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def media_file(tmp_path):
    """An existing (dummy) media file path."""

    path = tmp_path / "book.m4b"
    path.write_bytes(b"\x00" * 64)
    return path


@pytest.fixture
def empty_tag_reader():
    return lambda path: TagInfo()
