"""Data models for chapter timelines."""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

FFMETADATA_HEADER = ";FFMETADATA1"
AUDIOBOOK_GENRE = "AudioBook"


@dataclass
class Chapter:
    """A named interval of the combined media timeline."""

    title: str
    start: int  # milliseconds
    end: int  # milliseconds

    @property
    def duration(self) -> int:
        """Get chapter duration in milliseconds."""
        return self.end - self.start

    def to_ffmetadata(self) -> str:
        """
        Render this chapter as an FFMETADATA ``[CHAPTER]`` block.

        The title is written verbatim; a title containing a newline or ``=``
        produces a broken block.
        """
        return (
            "\n[CHAPTER]\n"
            "TIMEBASE=1/1000\n"
            f"START={self.start}\n"
            f"END={self.end}\n"
            f"title={self.title}\n"
        )

    def __str__(self) -> str:
        return f"{self.title} ({self.start}-{self.end} ms)"


@dataclass
class ChapterList:
    """
    Ordered chapters of one audiobook plus its title and author.

    List order is playback order. Chapters are expected to be contiguous
    (each chapter ends where the next one starts) but mutations do not
    enforce it; use is_contiguous() to check.
    """

    title: str
    author: str
    chapters: list[Chapter] = field(default_factory=list)

    @classmethod
    def from_path_set(
        cls,
        paths: Iterable[Path],
        title: str,
        author: str,
        *,
        tag_reader: Callable[[Path], "TagInfo"] | None = None,
        duration_probe: Callable[[Path], int] | None = None,
    ) -> "ChapterList":
        """Build a timeline from audio files; see timeline.build_timeline()."""
        from audiobook_tagger.tags import measure_duration, read_tag_info
        from audiobook_tagger.timeline import build_timeline

        return build_timeline(
            paths,
            title,
            author,
            tag_reader=tag_reader or read_tag_info,
            duration_probe=duration_probe or measure_duration,
        )

    def push(self, chapter: Chapter) -> None:
        self.chapters.append(chapter)

    def insert(self, index: int, chapter: Chapter) -> None:
        self.chapters.insert(index, chapter)

    def remove(self, index: int) -> Chapter:
        """Remove and return the chapter at index."""
        return self.chapters.pop(index)

    def __getitem__(self, index: int) -> Chapter:
        return self.chapters[index]

    def __setitem__(self, index: int, chapter: Chapter) -> None:
        self.chapters[index] = chapter

    def __len__(self) -> int:
        return len(self.chapters)

    def __iter__(self) -> Iterator[Chapter]:
        return iter(self.chapters)

    @property
    def total_duration(self) -> int:
        """Get the end of the last chapter in milliseconds."""
        return self.chapters[-1].end if self.chapters else 0

    def is_contiguous(self) -> bool:
        """Check that chapters start at 0 and follow each other without gaps."""
        if not self.chapters:
            return True
        if self.chapters[0].start != 0:
            return False
        return all(
            current.end == following.start
            for current, following in zip(self.chapters, self.chapters[1:])
        )

    def to_ffmetadata(self) -> str:
        """Render the whole timeline in ffmpeg's FFMETADATA text format."""
        parts = [
            f"{FFMETADATA_HEADER}\n",
            f"title={self.title}\n",
            f"artist={self.author}\n",
            f"genre={AUDIOBOOK_GENRE}\n",
        ]
        parts.extend(chapter.to_ffmetadata() for chapter in self.chapters)
        return "".join(parts)


def render_ffmetadata(chapter_list: ChapterList) -> str:
    """Render a chapter list as FFMETADATA text."""
    return chapter_list.to_ffmetadata()


@dataclass
class TagInfo:
    """Common ID3 fields of an audio file. Missing frames are None."""

    title: str | None = None
    artist: str | None = None
    album: str | None = None
    album_artist: str | None = None
    composer: str | None = None
    disc: str | None = None
    track: str | None = None


def format_time_human(milliseconds: int) -> str:
    """Format milliseconds as a human readable string."""
    seconds = milliseconds // 1000
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    elif minutes > 0:
        return f"{minutes}m {secs}s"
    else:
        return f"{secs}s"
