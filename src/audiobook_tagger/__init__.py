"""
Audiobook Tagger - tag audiobook files and manage their chapters.

This package builds chapter timelines from audio files or from already
chaptered containers, converts them to ffmpeg's FFMETADATA format and to an
editable TOML document, and embeds them into media files with ffmpeg.

Basic usage:
    >>> from pathlib import Path
    >>> from audiobook_tagger import build_timeline, expand_wildcards
    >>> paths = expand_wildcards(["book/*.mp3"])
    >>> chapters = build_timeline(paths, "Book", "Author")
    >>> print(chapters.to_ffmetadata())

Editing the chapters of an existing file:
    >>> from audiobook_tagger import apply_chapters, decode_chapters, encode_chapters
    >>> from audiobook_tagger import extract_chapter_list
    >>> text = encode_chapters(extract_chapter_list(Path("book.m4b")))
    >>> apply_chapters(decode_chapters(text), Path("book.m4b"), Path("edited.m4b"))

Requirements:
    - Python 3.12+
    - ffmpeg and ffprobe installed and in PATH
"""

__version__ = "0.3.0"
__author__ = "Audiobook Tagger Contributors"

from audiobook_tagger.errors import (
    ChapterReadError,
    DurationReadError,
    FfmpegNotFoundError,
    FfprobeNotFoundError,
    FileIOError,
    InterchangeDecodeError,
    InterchangeEncodeError,
    InvalidPatternError,
    MissingTemplateTokenError,
    MuxError,
    NoFilesFoundError,
    TagError,
    TaggerError,
    ToolNotFoundError,
)
from audiobook_tagger.models import Chapter, ChapterList, TagInfo, render_ffmetadata
from audiobook_tagger.interchange import decode_chapters, encode_chapters
from audiobook_tagger.muxer import apply_chapters, combine_files
from audiobook_tagger.paths import expand_wildcards
from audiobook_tagger.probe import extract_chapter_list, parse_probe_output
from audiobook_tagger.runner import ProcessResult, ProcessRunner, SubprocessRunner
from audiobook_tagger.tags import measure_duration, read_tag_info, write_tag
from audiobook_tagger.timeline import build_timeline, timeline_from_durations

__all__ = [
    # Version
    "__version__",
    # Models
    "Chapter",
    "ChapterList",
    "TagInfo",
    "render_ffmetadata",
    # Building and extracting timelines
    "build_timeline",
    "timeline_from_durations",
    "extract_chapter_list",
    "parse_probe_output",
    # Interchange
    "encode_chapters",
    "decode_chapters",
    # Muxing
    "apply_chapters",
    "combine_files",
    # Collaborators
    "expand_wildcards",
    "measure_duration",
    "read_tag_info",
    "write_tag",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    # Errors
    "TaggerError",
    "FileIOError",
    "ToolNotFoundError",
    "FfmpegNotFoundError",
    "FfprobeNotFoundError",
    "TagError",
    "NoFilesFoundError",
    "InvalidPatternError",
    "MissingTemplateTokenError",
    "DurationReadError",
    "ChapterReadError",
    "InterchangeEncodeError",
    "InterchangeDecodeError",
    "MuxError",
]
