# ruff: noqa: B008
"""Command-line interface for audiobook-tagger."""
# we will ignore Ruff B008 here because of how Typer handles args

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from audiobook_tagger import commands
from audiobook_tagger.dependencies import check_dependencies, format_dependency_check
from audiobook_tagger.errors import TaggerError
from audiobook_tagger.logging_setup import setup_logging
from audiobook_tagger.models import ChapterList, format_time_human
from audiobook_tagger.muxer import DEFAULT_BITRATE

app = typer.Typer(
    name="audiobook-tagger",
    help="Tag audiobook files and manage their chapters.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

PATTERNS_HELP = "Audio files or wildcard patterns"

FFMPEG_OPTION = typer.Option(
    "ffmpeg", "--ffmpeg-path", envvar="AUDIOBOOK_TAGGER_FFMPEG", help="ffmpeg executable"
)
FFPROBE_OPTION = typer.Option(
    "ffprobe", "--ffprobe-path", envvar="AUDIOBOOK_TAGGER_FFPROBE", help="ffprobe executable"
)
OVERWRITE_OPTION = typer.Option(False, "--overwrite", help="Replace the output file if it exists")


@contextmanager
def report_errors() -> Iterator[None]:
    """Print TaggerError messages and exit with status 1."""
    try:
        yield
    except TaggerError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


def print_chapter_table(chapter_list: ChapterList) -> None:
    table = Table(
        title=f"{escape(chapter_list.title)} by {escape(chapter_list.author)}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Title")
    table.add_column("Start (ms)", justify="right")
    table.add_column("End (ms)", justify="right")
    table.add_column("Duration", justify="right", style="yellow")

    for chapter in chapter_list:
        table.add_row(
            escape(chapter.title),
            str(chapter.start),
            str(chapter.end),
            format_time_human(chapter.duration),
        )

    console.print(table)


@app.command("show-tags")
def show_tags(patterns: list[str] = typer.Argument(..., help=PATTERNS_HELP)):
    """Show common ID3 tags of files."""
    with report_errors():
        rows = commands.show_tags(patterns)

    table = Table(show_header=True, header_style="bold cyan")
    for column in (
        "File",
        "Title",
        "Album",
        "Author\n(Artist)",
        "Album Artist",
        "Narrator\n(Composer)",
        "Disc",
        "Track",
    ):
        table.add_column(column)

    for path, tag in rows:
        table.add_row(
            escape(path.name),
            *(
                escape(value or "")
                for value in (
                    tag.title,
                    tag.album,
                    tag.artist,
                    tag.album_artist,
                    tag.composer,
                    tag.disc,
                    tag.track,
                )
            ),
        )

    console.print(table)


@app.command("number-files")
def number_files(
    patterns: list[str] = typer.Argument(..., help=PATTERNS_HELP),
    start: int = typer.Option(1, "--start", "-s", min=0, help="First track number"),
):
    """Set the track number of each file to a sequential number."""
    with report_errors():
        paths = commands.number_files(patterns, start)
    console.print(f"[green]✓[/green] Numbered {len(paths)} files")


@app.command("number-chapters")
def number_chapters(
    naming_scheme: str = typer.Argument(..., help="Title template containing '%n'"),
    patterns: list[str] = typer.Argument(..., help=PATTERNS_HELP),
    start: int = typer.Option(1, "--start", "-s", help="First chapter number"),
):
    """Set the title of each file from a naming scheme, replacing '%n' with a sequential number."""
    with report_errors():
        paths = commands.number_chapters(naming_scheme, patterns, start)
    console.print(f"[green]✓[/green] Renamed {len(paths)} files")


@app.command("change-title")
def change_title(
    title: str = typer.Argument(..., help="New title"),
    patterns: list[str] = typer.Argument(..., help=PATTERNS_HELP),
):
    """Change the title tag of each file."""
    with report_errors():
        commands.change_title(title, patterns)


@app.command("change-author")
def change_author(
    author: str = typer.Argument(..., help="New author"),
    patterns: list[str] = typer.Argument(..., help=PATTERNS_HELP),
):
    """Change the author (artist) tag of each file."""
    with report_errors():
        commands.change_author(author, patterns)


@app.command("change-narrator")
def change_narrator(
    narrator: str = typer.Argument(..., help="New narrator"),
    patterns: list[str] = typer.Argument(..., help=PATTERNS_HELP),
):
    """Change the narrator (composer) tag of each file."""
    with report_errors():
        commands.change_narrator(narrator, patterns)


@app.command("change-tag")
def change_tag(
    tag: str = typer.Argument(..., help="ID3 text frame id, e.g. TALB"),
    value: str = typer.Argument(..., help="New value"),
    patterns: list[str] = typer.Argument(..., help=PATTERNS_HELP),
):
    """Change an arbitrary ID3 text frame of each file."""
    with report_errors():
        commands.change_tag(tag, value, patterns)


@app.command("combine-files")
def combine_files(
    patterns: list[str] = typer.Argument(..., help=PATTERNS_HELP),
    output: Path = typer.Option(Path("./output.mp4"), "--output", "-o", help="Output file"),
    bitrate: int = typer.Option(DEFAULT_BITRATE, "--bitrate", "-b", min=1, help="AAC kbps"),
    title: str | None = typer.Option(None, "--title", help="Book title (default: album tag)"),
    author: str | None = typer.Option(None, "--author", help="Book author (default: artist tag)"),
    ffmpeg_path: str = FFMPEG_OPTION,
    overwrite: bool = OVERWRITE_OPTION,
):
    """Combine audio files into one file with a chapter per input file."""
    with report_errors():
        chapter_list = commands.combine(
            patterns,
            output,
            bitrate=bitrate,
            title=title,
            author=author,
            ffmpeg_path=ffmpeg_path,
            overwrite=overwrite,
        )
    console.print(f"[green]✓[/green] Wrote {len(chapter_list)} chapters to {escape(str(output))}")


@app.command("show-chapters")
def show_chapters(
    path: Path = typer.Argument(..., help="Chaptered media file"),
    ffprobe_path: str = FFPROBE_OPTION,
):
    """Show the chapters embedded in a media file."""
    with report_errors():
        chapter_list = commands.show_chapters(path, ffprobe_path=ffprobe_path)
    print_chapter_table(chapter_list)


@app.command("export-chapters")
def export_chapters(
    path: Path = typer.Argument(..., help="Chaptered media file"),
    output: Path | None = typer.Option(None, "--output", "-o", help="TOML file to write"),
    ffprobe_path: str = FFPROBE_OPTION,
):
    """Export the chapters of a media file as editable TOML."""
    with report_errors():
        text = commands.export_chapters(path, output, ffprobe_path=ffprobe_path)
    if output is None:
        typer.echo(text, nl=False)


@app.command("import-chapters")
def import_chapters(
    path: Path = typer.Argument(..., help="Source media file"),
    toml_file: str = typer.Argument(..., help="TOML chapter file, or '-' for stdin"),
    output: Path = typer.Argument(..., help="Output media file"),
    ffmpeg_path: str = FFMPEG_OPTION,
    overwrite: bool = OVERWRITE_OPTION,
):
    """Write a copy of a media file with chapters from a TOML file."""
    with report_errors():
        if toml_file == "-":
            toml_text = sys.stdin.read()
        else:
            toml_text = commands.read_interchange_file(Path(toml_file))
        chapter_list = commands.import_chapters(
            path, toml_text, output, ffmpeg_path=ffmpeg_path, overwrite=overwrite
        )
    console.print(f"[green]✓[/green] Wrote {len(chapter_list)} chapters to {escape(str(output))}")


@app.command()
def check(
    ffmpeg_path: str = FFMPEG_OPTION,
    ffprobe_path: str = FFPROBE_OPTION,
):
    """Verify that the configured ffmpeg and ffprobe can be run."""
    result = check_dependencies(ffmpeg_path, ffprobe_path)

    if not result.all_found:
        console.print(Text(format_dependency_check(result)))
        raise typer.Exit(1)

    content = Text()
    for status in result.tools:
        content.append(f"{status.name:<8}", style="bold")
        content.append(status.path or "", style="cyan")
        if status.version:
            content.append(f"  ({status.version})", style="dim")
        content.append("\n")
    content.rstrip()
    console.print(Panel(content, title="ffmpeg tools", border_style="green"))


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version"),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Show debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors"),
):
    """Audiobook tagger - tag files and manage chapters."""
    if version:
        from audiobook_tagger import __version__

        console.print(f"audiobook-tagger version {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()

    setup_logging("DEBUG" if verbose else "WARNING" if quiet else "INFO")


def main():
    app()


if __name__ == "__main__":
    main()
