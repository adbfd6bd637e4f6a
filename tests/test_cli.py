"""Tests for the command-line interface."""
import json

import pytest

from shiftplan.cli import EXIT_INPUT_ERROR, build_parser, main
from shiftplan.io.snapshot import load_snapshot


@pytest.fixture
def snapshot_file(tmp_path, snapshot_document):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(snapshot_document), encoding="utf-8")
    return path


class TestParser:
    """Tests for argument parsing."""

    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_generate_options(self):
        args = build_parser().parse_args(["-vv", "generate", "s.json", "--seed", "3", "-o", "out.json", "--json"])

        assert args.command == "generate"
        assert args.seed == 3
        assert args.output == "out.json"
        assert args.json_out
        assert args.verbose == 2


class TestGenerateCommand:
    """Tests for `shiftplan generate`."""

    def test_generate_json_summary(self, snapshot_file, capsys):
        code = main(["generate", str(snapshot_file), "--seed", "1", "--json"])
        out = json.loads(capsys.readouterr().out)

        assert code == 0
        assert out["summary"]["eligible"] == 3
        assert set(out["targets"]) == {"e1", "e2", "e3"}

    def test_generate_writes_output(self, snapshot_file, tmp_path, capsys):
        output = tmp_path / "generated.json"

        code = main(["generate", str(snapshot_file), "--seed", "1", "-o", str(output)])

        assert code == 0
        generated = load_snapshot(output)
        assert len(generated.schedule) > 3
        assert "Summary:" in capsys.readouterr().out

    def test_generate_with_config(self, snapshot_file, tmp_path, capsys):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"min_staff_morning": 2, "min_staff_evening": 1}), encoding="utf-8")

        assert main(["generate", str(snapshot_file), "--config", str(config), "--json"]) == 0

    def test_invalid_config_exit_code(self, snapshot_file, tmp_path, capsys):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"max_consecutive_days": 0}), encoding="utf-8")

        code = main(["generate", str(snapshot_file), "--config", str(config)])

        assert code == EXIT_INPUT_ERROR
        assert "error:" in capsys.readouterr().err


class TestOtherCommands:
    """Tests for `validate` and `stats`."""

    def test_validate_json(self, snapshot_file, capsys):
        code = main(["validate", str(snapshot_file), "--json"])
        out = json.loads(capsys.readouterr().out)

        assert code == 0
        assert out["summary"]["rest_gap"] == 0
        assert out["summary"]["understaffed_days"] == 21

    def test_stats_json(self, snapshot_file, capsys):
        code = main(["stats", str(snapshot_file), "--json"])
        rows = {r["id"]: r for r in json.loads(capsys.readouterr().out)["stats"]}

        assert code == 0
        assert rows["e1"]["hours"] == 8.5 + 7   # override on day 3, leave on day 4
        assert rows["e2"]["hours"] == 8 + 1     # 13-21 on 8h plus an English lesson

    def test_stats_table(self, snapshot_file, capsys):
        assert main(["stats", str(snapshot_file)]) == 0
        assert "fatigue" in capsys.readouterr().out

    def test_missing_file(self, tmp_path, capsys):
        code = main(["validate", str(tmp_path / "missing.json")])

        assert code == EXIT_INPUT_ERROR
        assert "error:" in capsys.readouterr().err

    def test_malformed_snapshot(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"employees": [], "schedule": {"oops": "8-15"}}), encoding="utf-8")

        assert main(["stats", str(path)]) == EXIT_INPUT_ERROR
