"""Unit tests for the CLI module."""

import pytest
from typer.testing import CliRunner

import audiobook_tagger.muxer
import audiobook_tagger.probe
from audiobook_tagger import __version__
from audiobook_tagger.cli import app
from audiobook_tagger.interchange import encode_chapters
from audiobook_tagger.runner import ProcessResult
from audiobook_tagger.tags import read_tag_info
from tests.test_utils import FakeRunner, make_tagged_file

runner = CliRunner()


@pytest.fixture
def tagged_dir(tmp_path):
    make_tagged_file(tmp_path / "01.mp3", title="Intro", artist="Jane", album="Book")
    make_tagged_file(tmp_path / "02.mp3", title="Outro", artist="Jane", album="Book")
    return tmp_path


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    fake = FakeRunner()
    monkeypatch.setattr(audiobook_tagger.muxer, "SubprocessRunner", lambda: fake)
    return fake


class TestCLI:
    """Tests for CLI entry points."""

    def test_app_exists(self):
        assert app is not None

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_command_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "show-chapters" in result.output

    def test_unknown_command(self):
        result = runner.invoke(app, ["split"])
        assert result.exit_code != 0


class TestTagCommands:
    def test_show_tags(self, tagged_dir):
        result = runner.invoke(app, ["show-tags", str(tagged_dir / "*.mp3")])
        assert result.exit_code == 0
        assert "Intro" in result.output
        assert "Outro" in result.output

    def test_change_title(self, tagged_dir):
        result = runner.invoke(app, ["change-title", "Renamed", str(tagged_dir / "*.mp3")])
        assert result.exit_code == 0
        assert read_tag_info(tagged_dir / "02.mp3").title == "Renamed"

    def test_change_tag(self, tagged_dir):
        result = runner.invoke(app, ["change-tag", "TALB", "Other", str(tagged_dir / "01.mp3")])
        assert result.exit_code == 0
        assert read_tag_info(tagged_dir / "01.mp3").album == "Other"

    def test_number_files(self, tagged_dir):
        result = runner.invoke(app, ["number-files", str(tagged_dir / "*.mp3")])
        assert result.exit_code == 0
        assert read_tag_info(tagged_dir / "02.mp3").track == "2"

    def test_number_chapters(self, tagged_dir):
        result = runner.invoke(
            app, ["number-chapters", "Part %n", str(tagged_dir / "*.mp3"), "--start", "0"]
        )
        assert result.exit_code == 0
        assert read_tag_info(tagged_dir / "02.mp3").title == "Part 1"

    def test_number_chapters_without_token(self, tagged_dir):
        result = runner.invoke(app, ["number-chapters", "Part", str(tagged_dir / "*.mp3")])
        assert result.exit_code == 1
        assert "format specifier" in result.output
        assert read_tag_info(tagged_dir / "01.mp3").title == "Intro"

    def test_no_matching_files(self, tmp_path):
        result = runner.invoke(app, ["show-tags", str(tmp_path / "*.mp3")])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestChapterCommands:
    def test_show_chapters_missing_ffprobe(self, media_file):
        result = runner.invoke(
            app, ["show-chapters", str(media_file), "--ffprobe-path", "/nonexistent/ffprobe"]
        )
        assert result.exit_code == 1
        assert "/nonexistent/ffprobe" in result.output

    def test_show_chapters(self, media_file, probe_document, monkeypatch):
        fake = FakeRunner(ProcessResult(returncode=0, stdout=probe_document))
        monkeypatch.setattr(audiobook_tagger.probe, "SubprocessRunner", lambda: fake)

        result = runner.invoke(app, ["show-chapters", str(media_file)])

        assert result.exit_code == 0
        assert "One" in result.output
        assert "Two" in result.output

    def test_export_to_stdout(self, media_file, probe_document, monkeypatch):
        fake = FakeRunner(ProcessResult(returncode=0, stdout=probe_document))
        monkeypatch.setattr(audiobook_tagger.probe, "SubprocessRunner", lambda: fake)

        result = runner.invoke(app, ["export-chapters", str(media_file)])

        assert result.exit_code == 0
        assert 'title = "One"' in result.output
        assert "end = 2000" in result.output

    def test_ffprobe_path_from_environment(self, media_file, probe_document, monkeypatch):
        fake = FakeRunner(ProcessResult(returncode=0, stdout=probe_document))
        monkeypatch.setattr(audiobook_tagger.probe, "SubprocessRunner", lambda: fake)

        runner.invoke(
            app,
            ["export-chapters", str(media_file)],
            env={"AUDIOBOOK_TAGGER_FFPROBE": "/env/ffprobe"},
        )

        assert fake.calls[0][0] == "/env/ffprobe"

    def test_import_from_stdin(self, media_file, sample_chapter_list, fake_ffmpeg, tmp_path):
        output = tmp_path / "out.m4b"
        result = runner.invoke(
            app,
            ["import-chapters", str(media_file), "-", str(output)],
            input=encode_chapters(sample_chapter_list),
        )

        assert result.exit_code == 0
        assert fake_ffmpeg.files["ffmetadata.txt"] == sample_chapter_list.to_ffmetadata()
        assert fake_ffmpeg.args[0] == "-n"

    def test_import_from_file_with_overwrite(
        self, media_file, sample_chapter_list, fake_ffmpeg, tmp_path
    ):
        toml_file = tmp_path / "chapters.toml"
        toml_file.write_text(encode_chapters(sample_chapter_list), encoding="utf-8")

        result = runner.invoke(
            app,
            [
                "import-chapters",
                str(media_file),
                str(toml_file),
                str(tmp_path / "out.m4b"),
                "--overwrite",
            ],
        )

        assert result.exit_code == 0
        assert fake_ffmpeg.args[0] == "-y"

    def test_import_invalid_document(self, media_file, fake_ffmpeg, tmp_path):
        result = runner.invoke(
            app,
            ["import-chapters", str(media_file), "-", str(tmp_path / "out.m4b")],
            input="title = 3\n",
        )
        assert result.exit_code == 1
        assert fake_ffmpeg.calls == []

    def test_combine_files(self, tagged_dir, fake_ffmpeg, monkeypatch):
        monkeypatch.setattr(audiobook_tagger.muxer, "measure_duration", lambda path: 1500)

        result = runner.invoke(
            app,
            [
                "combine-files",
                str(tagged_dir / "*.mp3"),
                "-o",
                str(tagged_dir / "book.m4b"),
                "-b",
                "32",
            ],
        )

        assert result.exit_code == 0
        assert "32k" in fake_ffmpeg.args
        assert "END=3000\ntitle=Outro" in fake_ffmpeg.files["ffmetadata.txt"]


class TestCheckCommand:
    def test_missing_tools(self):
        result = runner.invoke(
            app,
            ["check", "--ffmpeg-path", "/nonexistent/ffmpeg", "--ffprobe-path", "/nonexistent/ffprobe"],
        )
        assert result.exit_code == 1
        assert "NOT FOUND" in result.output
