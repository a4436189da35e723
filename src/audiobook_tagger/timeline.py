"""Building a chapter timeline from a sequence of audio files."""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from audiobook_tagger.models import Chapter, ChapterList, TagInfo
from audiobook_tagger.tags import measure_duration, read_tag_info

logger = logging.getLogger(__name__)


def timeline_from_durations(
    entries: Iterable[tuple[str, int]], title: str, author: str
) -> ChapterList:
    """
    Lay out chapters back to back from (title, duration in ms) pairs.

    The first chapter starts at 0 and every chapter starts where the
    previous one ended.
    """
    chapter_list = ChapterList(title=title, author=author)
    playhead = 0

    for chapter_title, duration in entries:
        end = playhead + duration
        chapter_list.push(Chapter(title=chapter_title, start=playhead, end=end))
        playhead = end

    return chapter_list


def build_timeline(
    paths: Iterable[Path],
    title: str,
    author: str,
    *,
    tag_reader: Callable[[Path], TagInfo] = read_tag_info,
    duration_probe: Callable[[Path], int] = measure_duration,
) -> ChapterList:
    """
    Build a chapter list with one chapter per audio file, in iteration order.

    Each chapter is titled from the file's title tag, or its zero-based
    position when the tag has no title.

    Args:
        paths: Audio files in playback order.
        title: Title of the whole book.
        author: Author of the whole book.
        tag_reader: Reads the tag fields of a file.
        duration_probe: Returns the duration of a file in milliseconds.

    Raises:
        TagError: If a tag exists but cannot be read.
        DurationReadError: If a file's duration cannot be measured.
    """

    def entries():
        for index, path in enumerate(paths):
            chapter_title = tag_reader(path).title
            if chapter_title is None:
                chapter_title = str(index)
            duration = duration_probe(path)
            logger.debug("%s: %r, %d ms", path, chapter_title, duration)
            yield chapter_title, duration

    chapter_list = timeline_from_durations(entries(), title, author)
    logger.info(
        "Built %d chapters spanning %d ms", len(chapter_list), chapter_list.total_duration
    )
    return chapter_list
