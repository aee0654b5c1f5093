"""Tests for the command-line level printer."""

from __future__ import annotations

import pytest

from warrens import config
from warrens.__main__ import main


class TestMain:
    def test_prints_level_and_summary(self, capsys: pytest.CaptureFixture) -> None:
        exit_code = main(["--seed", "cli", "--width", "40", "--height", "25"])

        out = capsys.readouterr().out
        rows = out.split("\n\n")[0].splitlines()
        assert exit_code == 0
        assert len(rows) == 25
        assert all(len(row) == 40 for row in rows)
        assert out.count("@") == 1
        assert "Layers: " in out
        assert "Spawns: " in out
        assert "Snapshots" not in out

    def test_history_flag_records_snapshots(
        self, capsys: pytest.CaptureFixture
    ) -> None:
        main(["--seed", "cli", "--width", "40", "--height", "25", "--history"])

        out = capsys.readouterr().out
        assert config.SHOW_MAPGEN_VISUALIZER
        snapshots = int(out.rsplit("Snapshots: ", 1)[1].strip())
        assert snapshots > 0

    def test_same_seed_prints_same_level(self, capsys: pytest.CaptureFixture) -> None:
        main(["--seed", "again", "--width", "40", "--height", "25"])
        first = capsys.readouterr().out
        main(["--seed", "again", "--width", "40", "--height", "25"])
        second = capsys.readouterr().out

        assert first == second
