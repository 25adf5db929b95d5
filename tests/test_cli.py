"""Tests for settings and the command line."""
import json
import pytest
from pathlib import Path
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from showclock import main as cli
from showclock.config import Settings


class TestSettings:
    """Tests for environment configuration."""

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SHOWCLOCK_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("SHOWCLOCK_SCHEDULER_ENABLED", "false")
        monkeypatch.setenv("SHOWCLOCK_TIMEZONE", "Europe/Berlin")
        monkeypatch.setenv("SHOWCLOCK_TICK_MS", "250")
        monkeypatch.setenv("SHOWCLOCK_CAN_SAVE", "0")
        monkeypatch.setenv("SHOWCLOCK_LOG_LEVEL", "debug")

        config = Settings.from_env()

        assert config.data_dir == tmp_path
        assert config.scheduler_enabled is False
        assert config.timezone == "Europe/Berlin"
        assert config.tick_ms == 250
        assert config.can_save is False
        assert config.log_level == "DEBUG"
        assert config.preferences_path == tmp_path / "preferences.yaml"

    def test_defaults(self, monkeypatch):
        for name in ("SHOWCLOCK_SCHEDULER_ENABLED", "SHOWCLOCK_TIMEZONE", "SHOWCLOCK_OPEN_COMMAND"):
            monkeypatch.delenv(name, raising=False)

        config = Settings.from_env()

        assert config.scheduler_enabled is True
        assert config.timezone is None
        assert config.open_command is None


class TestCommandLine:
    """Tests for the showclock command."""

    @pytest.fixture(autouse=True)
    def isolated_settings(self, monkeypatch, tmp_path):
        config = Settings(data_dir=tmp_path / "data")
        monkeypatch.setattr(cli, "settings", config)
        return config

    def test_new_add_list_status(self, tmp_path, capsys):
        path = tmp_path / "week.lxs"

        assert cli.main(["new", str(path), "--enable"]) == 0
        assert json.loads(path.read_text())["enabled"] is True

        assert cli.main(["add", str(path), "08:30", "show.lxp", "--label", "Opening"]) == 0
        entries = json.loads(path.read_text())["entries"]
        assert entries == [{
            "enabled": True, "hours": 8, "minutes": 30, "seconds": 0,
            "project": "show.lxp", "label": "Opening",
        }]

        capsys.readouterr()
        assert cli.main(["list", str(path)]) == 0
        out = capsys.readouterr().out
        assert "08:30:00" in out
        assert "Opening" in out

        assert cli.main(["status", str(path)]) == 0
        status = json.loads(capsys.readouterr().out)
        assert status["entries_total"] == 1
        assert status["file"] == str(path)

    def test_status_restores_last_schedule(self, tmp_path, capsys, isolated_settings):
        path = tmp_path / "week.lxs"
        cli.main(["new", str(path)])
        capsys.readouterr()

        assert cli.main(["status"]) == 0
        assert json.loads(capsys.readouterr().out)["file"] == str(path)
        assert isolated_settings.preferences_path.exists()

    def test_add_rejects_bad_time(self, tmp_path):
        path = tmp_path / "week.lxs"
        cli.main(["new", str(path)])
        assert cli.main(["add", str(path), "25:00", "show.lxp"]) == 2
        assert json.loads(path.read_text())["entries"] == []

    def test_list_missing_file_fails(self, tmp_path):
        assert cli.main(["list", str(tmp_path / "missing.lxs")]) == 1

    def test_build_engine_wires_settings(self, isolated_settings):
        isolated_settings.timezone = "UTC"
        isolated_settings.can_save = False
        engine = cli.build_engine(isolated_settings)

        assert engine.timezone == "UTC"
        assert engine.store.permissions.can_save() is False
        assert engine.preferences.path == Path(isolated_settings.preferences_path)

    def test_unknown_timezone_fails_at_startup(self, isolated_settings, tmp_path):
        isolated_settings.timezone = "Mars/Olympus"
        assert cli.main(["status"]) == 2

    def test_run_starts_and_stops_runner(self, tmp_path, monkeypatch):
        path = tmp_path / "week.lxs"
        cli.main(["new", str(path), "--enable"])
        runners = []

        class InterruptedRunner(cli.ScheduleRunner):
            def start(self):
                runners.append(self)
                raise KeyboardInterrupt

            def stop(self):
                self.stopped = True

        monkeypatch.setattr(cli, "ScheduleRunner", InterruptedRunner)

        assert cli.main(["run", str(path)]) == 0
        runner = runners[0]
        assert runner.stopped is True
        assert runner.tick_ms == cli.settings.tick_ms
        assert runner.engine.file == path
        assert runner.engine.active is True
