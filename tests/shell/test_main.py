"""Tests for the process entry point."""

import os
from unittest.mock import patch

from chronobot import main as main_module
from chronobot.main import main


BASE_ENV = {
    "CENTER_LAT": "48.8566",
    "CENTER_LON": "2.3522",
    "MAX_RADIUS_KM": "10",
    "DEPARTMENTS_TO_CHECK": "75",
    "ENV": "TEST",
}


class TestMain:
    """Tests for main() function."""

    @patch.object(main_module, "load_dotenv")
    @patch.object(main_module, "run")
    def test_missing_departments_exits_with_error(self, mock_run, mock_dotenv, caplog):
        env = {k: v for k, v in BASE_ENV.items() if k != "DEPARTMENTS_TO_CHECK"}
        with patch.dict(os.environ, env, clear=True):
            status = main([])

        assert status == 1
        mock_run.assert_not_called()
        assert "DEPARTMENTS_TO_CHECK" in caplog.text

    @patch.object(main_module, "load_dotenv")
    @patch.object(main_module, "run")
    def test_starts_scheduler_with_interval(self, mock_run, mock_dotenv):
        with patch.dict(os.environ, {**BASE_ENV, "CHECK_INTERVAL_SEC": "30"}, clear=True):
            status = main([])

        assert status == 0
        orchestrator, interval = mock_run.call_args.args
        assert interval == 30
        assert orchestrator.config.departments == ("75",)

    @patch.object(main_module, "load_dotenv")
    @patch.object(main_module, "run")
    @patch.object(main_module, "Orchestrator")
    def test_once_runs_single_sweep(self, mock_orchestrator_class, mock_run, mock_dotenv):
        with patch.dict(os.environ, BASE_ENV, clear=True):
            status = main(["--once"])

        assert status == 0
        mock_orchestrator_class.return_value.sweep.assert_called_once_with()
        mock_run.assert_not_called()

    @patch.object(main_module, "load_dotenv")
    @patch.object(main_module, "run")
    def test_config_file_option(self, mock_run, mock_dotenv, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("departments: [13, 83]\nmode: simulate\n")

        with patch.dict(os.environ, {}, clear=True):
            status = main(["--config", str(config_file)])

        assert status == 0
        orchestrator, _ = mock_run.call_args.args
        assert orchestrator.config.departments == ("13", "83")
