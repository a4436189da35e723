"""
Operations behind the CLI subcommands.

Each function expands its wildcard patterns first and stops at the first
failing file; files processed before the failure keep their changes.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from audiobook_tagger.errors import FileIOError, MissingTemplateTokenError
from audiobook_tagger.interchange import decode_chapters, encode_chapters
from audiobook_tagger.models import ChapterList, TagInfo
from audiobook_tagger.muxer import DEFAULT_BITRATE, apply_chapters, combine_files
from audiobook_tagger.paths import expand_wildcards
from audiobook_tagger.probe import UNKNOWN_AUTHOR, UNKNOWN_TITLE, extract_chapter_list
from audiobook_tagger.runner import ProcessRunner
from audiobook_tagger.tags import (
    ARTIST_FRAME,
    NARRATOR_FRAME,
    TITLE_FRAME,
    read_tag_info,
    write_tag,
    write_track,
)

logger = logging.getLogger(__name__)

NUMBER_TOKEN = "%n"


def show_tags(patterns: Iterable[str]) -> list[tuple[Path, TagInfo]]:
    """Read the common tag fields of every matched file."""
    return [(path, read_tag_info(path)) for path in expand_wildcards(patterns)]


def number_files(patterns: Iterable[str], start: int = 1) -> list[Path]:
    """Write sequential track numbers, starting at start, in path order."""
    paths = expand_wildcards(patterns)
    for number, path in enumerate(paths, start):
        write_track(path, number)
        logger.debug("%s: track %d", path.name, number)
    return paths


def number_chapters(naming_scheme: str, patterns: Iterable[str], start: int = 1) -> list[Path]:
    """
    Title each file from naming_scheme with ``%n`` replaced by its number.

    Raises:
        MissingTemplateTokenError: If naming_scheme lacks ``%n``. No file is
            touched in that case.
    """
    if NUMBER_TOKEN not in naming_scheme:
        raise MissingTemplateTokenError(NUMBER_TOKEN)

    paths = expand_wildcards(patterns)
    for number, path in enumerate(paths, start):
        write_tag(path, TITLE_FRAME, naming_scheme.replace(NUMBER_TOKEN, str(number)))
    return paths


def change_tag(frame_id: str, value: str, patterns: Iterable[str]) -> list[Path]:
    """Set an arbitrary ID3 text frame on every matched file."""
    paths = expand_wildcards(patterns)
    for path in paths:
        write_tag(path, frame_id, value)
    return paths


def change_title(title: str, patterns: Iterable[str]) -> list[Path]:
    return change_tag(TITLE_FRAME, title, patterns)


def change_author(author: str, patterns: Iterable[str]) -> list[Path]:
    return change_tag(ARTIST_FRAME, author, patterns)


def change_narrator(narrator: str, patterns: Iterable[str]) -> list[Path]:
    return change_tag(NARRATOR_FRAME, narrator, patterns)


def combine(
    patterns: Iterable[str],
    output: Path,
    *,
    bitrate: int = DEFAULT_BITRATE,
    title: str | None = None,
    author: str | None = None,
    ffmpeg_path: str = "ffmpeg",
    overwrite: bool = False,
    runner: ProcessRunner | None = None,
) -> ChapterList:
    """
    Combine the matched files into one chaptered audiobook.

    Title and author default to the album and artist tags of the first file.
    """
    paths = expand_wildcards(patterns)

    if title is None or author is None:
        first = read_tag_info(paths[0])
        title = title or first.album or UNKNOWN_TITLE
        author = author or first.artist or UNKNOWN_AUTHOR

    return combine_files(
        paths,
        output,
        title=title,
        author=author,
        bitrate=bitrate,
        runner=runner,
        ffmpeg_path=ffmpeg_path,
        overwrite=overwrite,
    )


def show_chapters(
    path: Path, *, ffprobe_path: str = "ffprobe", runner: ProcessRunner | None = None
) -> ChapterList:
    return extract_chapter_list(path, runner=runner, ffprobe_path=ffprobe_path)


def export_chapters(
    path: Path,
    output: Path | None = None,
    *,
    ffprobe_path: str = "ffprobe",
    runner: ProcessRunner | None = None,
) -> str:
    """
    Export the chapters of a media file as TOML.

    The TOML text is returned and, when output is given, also written there.
    """
    chapter_list = extract_chapter_list(path, runner=runner, ffprobe_path=ffprobe_path)
    text = encode_chapters(chapter_list)

    if output is not None:
        try:
            output.write_text(text, encoding="utf-8")
        except OSError as e:
            raise FileIOError(f"Could not write {output}: {e}", path=output) from e
        logger.info("Wrote %d chapters to %s", len(chapter_list), output)

    return text


def read_interchange_file(toml_path: Path) -> str:
    try:
        return toml_path.read_text(encoding="utf-8")
    except OSError as e:
        raise FileIOError(f"Could not read {toml_path}: {e}", path=toml_path) from e


def import_chapters(
    path: Path,
    toml_text: str,
    output: Path,
    *,
    ffmpeg_path: str = "ffmpeg",
    overwrite: bool = False,
    runner: ProcessRunner | None = None,
) -> ChapterList:
    """Replace the chapters of path with a TOML chapter document, writing output."""
    chapter_list = decode_chapters(toml_text)
    if not chapter_list.is_contiguous():
        logger.warning("Imported chapters have gaps or overlaps")

    apply_chapters(
        chapter_list,
        path,
        output,
        runner=runner,
        ffmpeg_path=ffmpeg_path,
        overwrite=overwrite,
    )
    return chapter_list
