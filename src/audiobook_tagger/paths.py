"""Expanding wildcard patterns into an ordered set of audio files."""

import glob
import logging
from collections.abc import Iterable
from pathlib import Path

from audiobook_tagger.errors import FileIOError, InvalidPatternError, NoFilesFoundError

logger = logging.getLogger(__name__)


def validate_pattern(pattern: str) -> None:
    """
    Reject patterns that the glob module would silently treat as literals.

    Raises:
        InvalidPatternError: For empty patterns, unclosed character classes,
            or ``**`` that is not a whole path component.
    """
    if not pattern:
        raise InvalidPatternError(pattern, "pattern is empty")

    # Character classes are scanned as fnmatch does: "[" inside a class is
    # literal, and a "]" right after "[" or "[!" is a member, not the end.
    i = 0
    while i < len(pattern):
        if pattern[i] != "[":
            i += 1
            continue
        j = i + 1
        if pattern[j : j + 1] == "!":
            j += 1
        if pattern[j : j + 1] == "]":
            j += 1
        end = pattern.find("]", j)
        if end == -1:
            raise InvalidPatternError(pattern, "unclosed character class '['")
        i = end + 1

    for component in Path(pattern).parts:
        if "**" in component and component != "**":
            raise InvalidPatternError(
                pattern, "recursive wildcards must be a whole path component '**'"
            )


def expand_wildcards(patterns: Iterable[str]) -> list[Path]:
    """
    Expand glob patterns into absolute file paths.

    Matches from all patterns are canonicalized, deduplicated and sorted, so
    the lexicographic order of the file names decides chapter order.

    Raises:
        InvalidPatternError: If a pattern is malformed.
        NoFilesFoundError: If no regular file matched.
    """
    patterns = list(patterns)
    found: set[Path] = set()

    for pattern in patterns:
        validate_pattern(pattern)
        for match in glob.glob(pattern, recursive=True):
            path = Path(match)
            if not path.is_file():
                continue
            try:
                found.add(path.resolve(strict=True))
            except OSError as e:
                raise FileIOError(f"Could not resolve {match}: {e}", path=match) from e

    if not found:
        raise NoFilesFoundError(patterns)

    logger.debug("Expanded %d pattern(s) into %d file(s)", len(patterns), len(found))
    return sorted(found)
