"""Embedding chapter metadata into media files with ffmpeg."""

import logging
import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path

from audiobook_tagger.errors import FfmpegNotFoundError, FileIOError, MuxError, ToolNotFoundError
from audiobook_tagger.models import ChapterList, TagInfo
from audiobook_tagger.runner import ProcessRunner, SubprocessRunner
from audiobook_tagger.tags import measure_duration, read_tag_info
from audiobook_tagger.timeline import build_timeline

logger = logging.getLogger(__name__)

DEFAULT_BITRATE = 64  # kbps
AUDIO_CODEC = "aac"

# Take global metadata and chapters only from the second input (the metadata file)
METADATA_MAPPING_ARGS = ["-map_metadata", "1", "-map_chapters", "1"]


def create_metadata_file(chapter_list: ChapterList, temp_dir: Path) -> Path:
    """Write the chapter list as an FFMETADATA file inside temp_dir."""
    metadata_path = temp_dir / "ffmetadata.txt"
    _write_text(metadata_path, chapter_list.to_ffmetadata())
    return metadata_path


def escape_concat_path(path: Path) -> str:
    """Quote a path for an ffmpeg concat list ``file`` directive."""
    return "'" + str(path).replace("'", "'\\''") + "'"


def create_concat_file(paths: Sequence[Path], temp_dir: Path) -> Path:
    """Write an ffmpeg concat demuxer list with one ``file`` line per input."""
    list_path = temp_dir / "files.txt"
    lines = [f"file {escape_concat_path(path)}" for path in paths]
    _write_text(list_path, "\n".join(lines) + "\n")
    return list_path


def _write_text(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise FileIOError(f"Could not write {path}: {e}", path=path) from e


def run_ffmpeg(runner: ProcessRunner, ffmpeg_path: str, args: list[str]) -> None:
    """
    Run ffmpeg and translate its exit status.

    Raises:
        FfmpegNotFoundError: If ffmpeg is not installed at ffmpeg_path.
        MuxError: If ffmpeg exits with a non-zero code or is killed.
    """
    try:
        result = runner.run(ffmpeg_path, args)
    except ToolNotFoundError as e:
        raise FfmpegNotFoundError(ffmpeg_path) from e

    if result.returncode == 0:
        return

    stderr_tail = "\n".join(result.stderr.strip().splitlines()[-10:])
    if stderr_tail:
        logger.error("ffmpeg output:\n%s", stderr_tail)
    raise MuxError(result.returncode, stderr_tail)


def _overwrite_flag(overwrite: bool) -> str:
    # -n makes ffmpeg fail instead of prompting when the output exists
    return "-y" if overwrite else "-n"


def apply_chapters(
    chapter_list: ChapterList,
    input_path: Path,
    output_path: Path,
    *,
    runner: ProcessRunner | None = None,
    ffmpeg_path: str = "ffmpeg",
    overwrite: bool = False,
) -> None:
    """
    Copy a media file while replacing its metadata and chapters.

    All streams are copied without re-encoding; title, artist and chapters
    come only from the chapter list.

    Args:
        chapter_list: Chapters to embed.
        input_path: Source media file.
        output_path: Destination media file.
        runner: Process runner used to invoke ffmpeg.
        ffmpeg_path: ffmpeg executable.
        overwrite: Replace output_path if it exists.
    """
    runner = runner or SubprocessRunner()

    with tempfile.TemporaryDirectory(prefix="audiobook-tagger-") as temp_dir:
        metadata_file = create_metadata_file(chapter_list, Path(temp_dir))

        args = [
            _overwrite_flag(overwrite),
            "-i",
            str(input_path),
            "-i",
            str(metadata_file),
            "-map",
            "0",
            *METADATA_MAPPING_ARGS,
            "-c",
            "copy",
            str(output_path),
        ]
        logger.info("Writing %d chapters to %s", len(chapter_list), output_path)
        run_ffmpeg(runner, ffmpeg_path, args)


def combine_files(
    paths: Sequence[Path],
    output_path: Path,
    *,
    title: str,
    author: str,
    bitrate: int = DEFAULT_BITRATE,
    runner: ProcessRunner | None = None,
    ffmpeg_path: str = "ffmpeg",
    overwrite: bool = False,
    tag_reader: Callable[[Path], TagInfo] | None = None,
    duration_probe: Callable[[Path], int] | None = None,
) -> ChapterList:
    """
    Concatenate audio files into one AAC file with a chapter per input file.

    Returns:
        The chapter list that was embedded.
    """
    runner = runner or SubprocessRunner()
    chapter_list = build_timeline(
        paths,
        title,
        author,
        tag_reader=tag_reader or read_tag_info,
        duration_probe=duration_probe or measure_duration,
    )

    with tempfile.TemporaryDirectory(prefix="audiobook-tagger-") as temp_dir:
        temp_path = Path(temp_dir)
        files_list = create_concat_file(paths, temp_path)
        metadata_file = create_metadata_file(chapter_list, temp_path)

        args = [
            _overwrite_flag(overwrite),
            "-f",
            "concat",
            "-safe",
            "0",
            "-i",
            str(files_list),
            "-i",
            str(metadata_file),
            *METADATA_MAPPING_ARGS,
            "-c:a",
            AUDIO_CODEC,
            "-b:a",
            f"{bitrate}k",
            str(output_path),
        ]
        logger.info("Combining %d files into %s", len(paths), output_path)
        run_ffmpeg(runner, ffmpeg_path, args)

    return chapter_list
