"""
TOML import/export of chapter lists for manual editing.

Document layout::

    title = "Book"
    author = "Author"

    [[chapters]]
    title = "Intro"
    start = 0
    end = 60000
"""

import tomllib

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from audiobook_tagger.errors import InterchangeDecodeError, InterchangeEncodeError
from audiobook_tagger.models import Chapter, ChapterList


class ChapterRecord(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: StrictStr
    start: StrictInt = Field(ge=0)
    end: StrictInt = Field(ge=0)


class ChapterDocument(BaseModel):
    """Schema of an exported chapter list."""

    model_config = ConfigDict(extra="forbid")

    title: StrictStr
    author: StrictStr
    chapters: list[ChapterRecord]

    @classmethod
    def from_chapter_list(cls, chapter_list: ChapterList) -> "ChapterDocument":
        return cls(
            title=chapter_list.title,
            author=chapter_list.author,
            chapters=[
                ChapterRecord(title=ch.title, start=ch.start, end=ch.end)
                for ch in chapter_list
            ],
        )

    def to_chapter_list(self) -> ChapterList:
        return ChapterList(
            title=self.title,
            author=self.author,
            chapters=[Chapter(title=r.title, start=r.start, end=r.end) for r in self.chapters],
        )


def _format_errors(e: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
        for err in e.errors()
    ]


def encode_chapters(chapter_list: ChapterList) -> str:
    """
    Serialize a chapter list to TOML.

    Raises:
        InterchangeEncodeError: If the chapter list holds values TOML cannot
            represent (e.g. a non-string title or a negative time).
    """
    try:
        document = ChapterDocument.from_chapter_list(chapter_list)
    except ValidationError as e:
        errors = _format_errors(e)
        raise InterchangeEncodeError(
            "Failed to write chapters as TOML: " + "; ".join(errors),
            details={"errors": errors},
        ) from e

    # Each chapter is written as its own [[chapters]] table; tomli_w would
    # otherwise inline short arrays of tables.
    header: dict[str, object] = {"title": document.title, "author": document.author}
    if not document.chapters:
        header["chapters"] = []

    try:
        parts = [tomli_w.dumps(header)]
        for record in document.chapters:
            parts.append("\n[[chapters]]\n" + tomli_w.dumps(record.model_dump()))
        return "".join(parts)
    except (TypeError, ValueError) as e:
        raise InterchangeEncodeError(f"Failed to write chapters as TOML: {e}") from e


def decode_chapters(text: str) -> ChapterList:
    """
    Parse a TOML chapter document.

    Raises:
        InterchangeDecodeError: If the text is not valid TOML or does not match
            the document layout.
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise InterchangeDecodeError(f"Failed to read TOML data: {e}") from e

    try:
        document = ChapterDocument.model_validate(data)
    except ValidationError as e:
        errors = _format_errors(e)
        raise InterchangeDecodeError(
            "Failed to read TOML data: " + "; ".join(errors), errors=errors
        ) from e

    return document.to_chapter_list()
