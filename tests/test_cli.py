"""Tests for the command line entry point."""

import json

import pytest

from calculator import cli
from tests.media_fixtures import write_pdf, write_png, write_temp_file


@pytest.fixture
def sample_files(tmp_path):
    return [
        write_temp_file(tmp_path, "notes.md", b"a" * 400),
        write_temp_file(tmp_path, "main.py", b"x" * 13),
        write_png(tmp_path, "diagram.png", 769, 769),
        write_pdf(tmp_path, "report.pdf", pages=2),
    ]


def run_json(capsys, argv):
    assert cli.main(argv + ["--json"]) == cli.EXIT_OK
    return json.loads(capsys.readouterr().out)


class TestJsonReport:
    def test_gemini_3_0_report(self, capsys, sample_files):
        report = run_json(capsys, ["--model", "gemini-3.0", "--resolution", "medium"] + [str(p) for p in sample_files])

        assert report["configuration"] == {
            "model_version": "gemini-3.0",
            "default_resolution_tier": "medium",
            "video_fps": 1.0,
        }
        assert [item["category"] for item in report["items"]] == ["text", "code", "image", "pdf"]
        assert [item["tokens"] for item in report["items"]] == [100, 4, 560, 1120]
        assert report["breakdown"] == {"text": 104, "images": 1680, "video": 0, "audio": 0, "overhead": 10}
        assert report["total"] == 104 + 1680 + 10

    def test_gemini_2_5_report(self, capsys, sample_files):
        report = run_json(capsys, ["--model", "gemini-2.5"] + [str(p) for p in sample_files])
        assert report["breakdown"]["images"] == 1032 + 2 * 258

    def test_context_usage(self, capsys, tmp_path):
        path = write_temp_file(tmp_path, "big.txt", b"a" * 5080)
        report = run_json(capsys, ["--context-window", "1300", str(path)])

        assert report["total"] == 1270 + 10
        assert report["context_window"] == 1300
        assert report["context_usage_percent"] == pytest.approx(98.46, abs=0.01)

    def test_unreadable_file_reported_as_failed(self, capsys, tmp_path):
        good = write_temp_file(tmp_path, "ok.txt", b"abcd")
        missing = tmp_path / "missing.png"
        report = run_json(capsys, ["--model", "gemini-3.0", str(good), str(missing)])

        states = {item["name"]: item for item in report["items"]}
        assert states["ok.txt"]["state"] == "ready"
        assert states["missing.png"]["state"] == "failed"
        assert states["missing.png"]["tokens"] == 0
        assert "not found" in states["missing.png"]["error"]
        assert report["total"] == 1 + 10


class TestTableOutput:
    def test_hides_empty_buckets(self, capsys, tmp_path):
        path = write_temp_file(tmp_path, "readme.txt", b"a" * 80)
        assert cli.main(["--model", "gemini-2.5", "--context-window", "128000", str(path)]) == cli.EXIT_OK
        header, body = capsys.readouterr().out.split("\n", 1)

        assert header.startswith("Model: gemini-2.5")
        assert "readme.txt" in body
        assert "Text & Code" in body
        assert "Overhead" in body
        assert "Video" not in body
        assert "Audio" not in body
        assert "Images & PDF" not in body
        assert "Total" in body
        assert "≈ 0.02% of 128k context" in body

    def test_render_table_shows_errors(self):
        report = {
            "configuration": {"model_version": "gemini-3.0", "default_resolution_tier": "high", "video_fps": 2.0},
            "items": [
                {"name": "clip.mp4", "category": "video", "size": 10, "state": "failed", "tokens": 0, "error": "bad"},
            ],
            "total": 10,
            "breakdown": {"text": 0, "images": 0, "video": 0, "audio": 0, "overhead": 10},
            "context_window": 128000,
            "context_usage_percent": 0.01,
        }
        table = cli.render_table(report)

        assert "Model: gemini-3.0  Resolution: high  Video FPS: 2" in table
        assert "    ! bad" in table
        assert "≈ 0.01% of 128k context" in table
        assert "Images & PDF" not in table


class TestContextWindowLabel:
    @pytest.mark.parametrize(
        "tokens,label",
        [
            (128000, "128k"),
            (1000000, "1000k"),
            (1300, "1,300"),
            (500, "500"),
        ],
    )
    def test_format_context_window(self, tokens, label):
        assert cli.format_context_window(tokens) == label

    def test_small_window_in_table(self, capsys, tmp_path):
        path = write_temp_file(tmp_path, "tiny.txt", b"a" * 40)
        assert cli.main(["--context-window", "500", str(path)]) == cli.EXIT_OK
        assert "≈ 4.00% of 500 context" in capsys.readouterr().out


class TestUsageErrors:
    def test_invalid_fps(self, capsys, tmp_path):
        path = write_temp_file(tmp_path, "a.txt", b"a")
        assert cli.main(["--fps", "0", str(path)]) == cli.EXIT_USAGE
        assert "Video FPS" in capsys.readouterr().err

    def test_invalid_model(self, capsys, tmp_path):
        path = write_temp_file(tmp_path, "a.txt", b"a")
        assert cli.main(["--model", "gemini-9", str(path)]) == cli.EXIT_USAGE
        assert "Unknown model version" in capsys.readouterr().err

    def test_non_positive_context_window(self, capsys, tmp_path):
        path = write_temp_file(tmp_path, "a.txt", b"a")
        assert cli.main(["--context-window=0", str(path)]) == cli.EXIT_USAGE
        assert "context window must be positive" in capsys.readouterr().err

    def test_paths_required(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([])
        assert exc_info.value.code == 2


class TestResolveConfiguration:
    def test_flags_override_environment(self, monkeypatch):
        import config

        monkeypatch.setattr(config, "DEFAULT_MODEL_VERSION", "gemini-2.5")
        monkeypatch.setattr(config, "DEFAULT_VIDEO_FPS", "3")
        args = cli.build_parser().parse_args(["--fps", "0.5", "x.mp4"])
        configuration = cli.resolve_configuration(args)

        assert configuration.model_version.value == "gemini-2.5"
        assert configuration.video_fps == 0.5
