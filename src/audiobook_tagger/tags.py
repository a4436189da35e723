"""Reading and writing ID3 tags and measuring audio durations with mutagen."""

import logging
from pathlib import Path

import mutagen
from mutagen import MutagenError
from mutagen.id3 import ID3, TRCK, Encoding, Frames, ID3NoHeaderError, TextFrame

from audiobook_tagger.errors import DurationReadError, TagError
from audiobook_tagger.models import TagInfo

logger = logging.getLogger(__name__)

# Frame ids used by the tagging commands
TITLE_FRAME = "TIT2"
ARTIST_FRAME = "TPE1"
NARRATOR_FRAME = "TCOM"
TRACK_FRAME = "TRCK"

ID3_VERSION = 3


def read_tag(path: Path) -> ID3:
    """
    Read the ID3 tag of a file.

    A file without an ID3 header yields an empty tag rather than an error.

    Raises:
        TagError: If the file cannot be read or its tag is corrupt.
    """
    try:
        return ID3(path)
    except ID3NoHeaderError:
        logger.debug("No ID3 tag in %s", path)
        return ID3()
    except MutagenError as e:
        raise TagError(f"Could not read ID3 tag of {path}: {e}", path=path) from e


def _text(tag: ID3, frame_id: str) -> str | None:
    frame = tag.get(frame_id)
    if frame is None or not frame.text:
        return None
    return str(frame.text[0])


def read_tag_info(path: Path) -> TagInfo:
    """Read the common fields shown by show-tags and used for chapter titles."""
    tag = read_tag(path)
    return TagInfo(
        title=_text(tag, TITLE_FRAME),
        artist=_text(tag, ARTIST_FRAME),
        album=_text(tag, "TALB"),
        album_artist=_text(tag, "TPE2"),
        composer=_text(tag, NARRATOR_FRAME),
        disc=_text(tag, "TPOS"),
        track=_text(tag, TRACK_FRAME),
    )


def _save(tag: ID3, path: Path) -> None:
    try:
        tag.save(path, v2_version=ID3_VERSION)
    except MutagenError as e:
        raise TagError(f"Could not write ID3 tag of {path}: {e}", path=path) from e


def write_tag(path: Path, frame_id: str, text: str) -> None:
    """
    Set a text frame, replacing any existing frame with the same id.

    Raises:
        TagError: If frame_id is not an ID3 text frame or the tag cannot be saved.
    """
    frame_cls = Frames.get(frame_id)
    if frame_cls is None or not issubclass(frame_cls, TextFrame):
        raise TagError(f"Not an ID3 text frame: {frame_id}", path=path)

    tag = read_tag(path)
    tag.add(frame_cls(encoding=Encoding.UTF16, text=[text]))
    _save(tag, path)
    logger.debug("Set %s=%r on %s", frame_id, text, path)


def write_track(path: Path, number: int) -> None:
    """Set the track number frame."""
    tag = read_tag(path)
    tag.add(TRCK(encoding=Encoding.UTF16, text=[str(number)]))
    _save(tag, path)


def measure_duration(path: Path) -> int:
    """
    Get the duration of an audio file in milliseconds (truncated).

    Raises:
        DurationReadError: If the file is not a readable audio file.
    """
    try:
        audio = mutagen.File(path)
    except MutagenError as e:
        raise DurationReadError(path, str(e)) from e

    if audio is None or audio.info is None:
        raise DurationReadError(path, "unrecognized audio format")

    return int(audio.info.length * 1000)
