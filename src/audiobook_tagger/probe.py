"""Module for probing chaptered media files to extract their chapter timeline."""

import logging
from collections.abc import Callable
from fractions import Fraction
from pathlib import Path

from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError, field_validator

from audiobook_tagger.errors import (
    ChapterReadError,
    FfprobeNotFoundError,
    FileIOError,
    ToolNotFoundError,
)
from audiobook_tagger.models import Chapter, ChapterList, TagInfo
from audiobook_tagger.runner import ProcessRunner, SubprocessRunner
from audiobook_tagger.tags import read_tag_info

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown title"
UNKNOWN_AUTHOR = "Unknown author"


# =============================================================================
# ffprobe output schema
# =============================================================================


class ProbeChapterTags(BaseModel):
    title: StrictStr


class ProbeChapter(BaseModel):
    """One entry of ffprobe's ``chapters`` array."""

    start: StrictInt
    end: StrictInt
    # e.g. "1/1000"; start and end are counted in these units
    time_base: str | None = None
    tags: ProbeChapterTags

    @field_validator("time_base")
    @classmethod
    def check_time_base(cls, value: str | None) -> str | None:
        if value is None:
            return value
        num, sep, den = value.partition("/")
        if not sep or not num.isdigit() or not den.isdigit() or int(den) == 0:
            raise ValueError(f"invalid time base {value!r}")
        return value

    def to_milliseconds(self, ticks: int) -> int:
        """Convert a start/end value to milliseconds, truncating."""
        if self.time_base is not None:
            ticks = int(ticks * Fraction(self.time_base) * 1000)
        return max(ticks, 0)


class ProbeFormat(BaseModel):
    tags: dict[str, str] = Field(default_factory=dict)

    def get_tag(self, key: str) -> str | None:
        """Look up a container tag, ignoring case."""
        if key in self.tags:
            return self.tags[key]
        key_lower = key.lower()
        for k, v in self.tags.items():
            if k.lower() == key_lower:
                return v
        return None


class ProbeOutput(BaseModel):
    """The parts of ``ffprobe -show_chapters -show_format`` JSON that are used."""

    chapters: list[ProbeChapter]
    format: ProbeFormat | None = None


# =============================================================================
# Probing
# =============================================================================


def parse_probe_output(text: str) -> ProbeOutput:
    """
    Parse and validate ffprobe JSON output.

    Raises:
        ChapterReadError: If the output is not JSON, lacks the chapters
            array, or any chapter misses its title, start or end.
    """
    try:
        return ProbeOutput.model_validate_json(text)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ChapterReadError(
            "An error occurred while reading the chapters of the audio file: "
            + "; ".join(errors),
            errors=errors,
        ) from e


def probe_file(
    file_path: Path,
    *,
    runner: ProcessRunner | None = None,
    ffprobe_path: str = "ffprobe",
) -> ProbeOutput:
    """
    Run ffprobe on a file and return its validated chapter and format data.

    Raises:
        FileIOError: If the file does not exist or ffprobe cannot be started.
        FfprobeNotFoundError: If ffprobe is not installed at ffprobe_path.
        ChapterReadError: If ffprobe fails or its output is malformed.
    """
    if not file_path.exists():
        raise FileIOError(f"File not found: {file_path}", path=file_path)

    runner = runner or SubprocessRunner()
    args = [
        "-v",
        "quiet",
        "-print_format",
        "json",
        "-show_chapters",
        "-show_format",
        str(file_path),
    ]

    try:
        result = runner.run(ffprobe_path, args)
    except ToolNotFoundError as e:
        raise FfprobeNotFoundError(ffprobe_path) from e

    if not result.success:
        raise ChapterReadError(
            f"ffprobe could not read {file_path} (exit code {result.returncode})"
        )

    return parse_probe_output(result.stdout)


def chapters_from_probe(output: ProbeOutput) -> list[Chapter]:
    """Convert probe records to chapters in their original order."""
    return [
        Chapter(
            title=record.tags.title,
            start=record.to_milliseconds(record.start),
            end=record.to_milliseconds(record.end),
        )
        for record in output.chapters
    ]


def extract_chapter_list(
    file_path: Path,
    *,
    runner: ProcessRunner | None = None,
    ffprobe_path: str = "ffprobe",
    tag_reader: Callable[[Path], TagInfo] = read_tag_info,
) -> ChapterList:
    """
    Extract the chapter timeline embedded in a media file.

    The book title and author come from the container's format tags, then
    from the file's ID3 tag, then fall back to placeholders.

    Args:
        file_path: Chaptered media file.
        runner: Process runner used to invoke ffprobe.
        ffprobe_path: ffprobe executable.
        tag_reader: Reads the ID3 fields of the file.

    Returns:
        ChapterList with the chapters in the order ffprobe reports them.
    """
    output = probe_file(file_path, runner=runner, ffprobe_path=ffprobe_path)
    chapters = chapters_from_probe(output)

    title = output.format.get_tag("title") if output.format else None
    author = output.format.get_tag("artist") if output.format else None
    if title is None or author is None:
        tag = tag_reader(file_path)
        title = title or tag.title
        author = author or tag.artist

    logger.debug("Extracted %d chapters from %s", len(chapters), file_path)
    return ChapterList(
        title=title or UNKNOWN_TITLE,
        author=author or UNKNOWN_AUTHOR,
        chapters=chapters,
    )
