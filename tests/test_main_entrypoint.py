"""
Tests for main.py - Main Entry Point

Tests for:
- Logging configuration (JSON dictConfig and colored fallback)
- Token validation
- Startup logging of the effective playback settings
- Container and bot creation
- Error handling and exit codes
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest
from pydantic import SecretStr

from guild_jukebox.domain.shared.messages import ErrorMessages
from guild_jukebox.main import _LOGGING_CONFIG_PATH, cli, main, setup_logging
from guild_jukebox.utils.logging import ColoredFormatter


class TestLoggingSetup:
    def _write_config(self, tmp_path, config: dict):
        path = tmp_path / "logging_config.json"
        path.write_text(json.dumps(config))
        return path

    def _make_valid_config(self) -> dict:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "handlers": {},
            "loggers": {
                "discord": {"level": "WARNING"},
                "yt_dlp": {"level": "WARNING"},
            },
            "root": {"level": "INFO", "handlers": []},
        }

    def test_dictconfig_called_with_file_contents(self, tmp_path):
        config = self._make_valid_config()
        path = self._write_config(tmp_path, config)

        with patch("logging.config.dictConfig") as mock_dc:
            setup_logging(config_path=path)

        mock_dc.assert_called_once_with(config)

    def test_missing_file_falls_back_to_colored_handler(self, tmp_path):
        with patch("logging.basicConfig") as mock_bc:
            setup_logging("WARNING", tmp_path / "missing.json")

        mock_bc.assert_called_once()
        kwargs = mock_bc.call_args.kwargs
        assert kwargs["level"] == logging.WARNING
        (handler,) = kwargs["handlers"]
        assert isinstance(handler.formatter, ColoredFormatter)

    def test_malformed_json_falls_back(self, tmp_path):
        path = tmp_path / "logging_config.json"
        path.write_text("{invalid json")

        with patch("logging.basicConfig") as mock_bc:
            setup_logging(config_path=path)

        mock_bc.assert_called_once()

    def test_invalid_dictconfig_falls_back(self, tmp_path):
        path = self._write_config(
            tmp_path,
            {"version": 1, "handlers": {"broken": {"class": "no.such.Handler"}}},
        )

        with patch("logging.basicConfig") as mock_bc:
            setup_logging(config_path=path)

        mock_bc.assert_called_once()

    def test_fallback_is_logged(self, tmp_path, caplog):
        missing = tmp_path / "missing.json"

        with patch("logging.basicConfig"):
            setup_logging(config_path=missing)

        assert any(str(missing) in r.getMessage() for r in caplog.records)

    def test_root_logger_level_overridden_by_settings(self, tmp_path):
        path = self._write_config(tmp_path, self._make_valid_config())
        with (
            patch("logging.config.dictConfig"),
            patch("logging.getLogger") as mock_get_logger,
        ):
            mock_root = MagicMock()
            mock_get_logger.return_value = mock_root

            setup_logging("debug", path)

            mock_root.setLevel.assert_called_once_with(logging.DEBUG)

    def test_unknown_level_defaults_to_info(self, tmp_path):
        path = self._write_config(tmp_path, self._make_valid_config())
        with (
            patch("logging.config.dictConfig"),
            patch("logging.getLogger") as mock_get_logger,
        ):
            setup_logging("LOUD", path)

            mock_get_logger.return_value.setLevel.assert_called_once_with(logging.INFO)

    def test_shipped_config_uses_colored_formatter(self):
        config = json.loads(_LOGGING_CONFIG_PATH.read_text())

        assert config["formatters"]["console"]["()"] == "guild_jukebox.utils.logging.ColoredFormatter"
        assert config["loggers"]["discord"]["level"] == "WARNING"

    def test_shipped_config_loads(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging("INFO")

            handler = next(h for h in root.handlers if h not in saved_handlers)
            assert type(handler.formatter).__name__ == "ColoredFormatter"
        finally:
            # dictConfig replaces the root handlers; put the originals back
            for h in root.handlers[:]:
                root.removeHandler(h)
            for h in saved_handlers:
                root.addHandler(h)
            root.setLevel(saved_level)


def _settings(token: str = "test_token_123") -> MagicMock:
    settings = MagicMock()
    settings.discord.token = SecretStr(token)
    settings.log_level = "INFO"
    settings.environment = "test"
    settings.playback.progress_interval_seconds = 5.0
    settings.playback.grace_period_seconds = 15.0
    settings.playback.queue_display_limit = 10
    return settings


class TestMainFunction:
    def test_main_returns_error_without_token(self):
        with (
            patch("guild_jukebox.config.settings.get_settings", return_value=_settings("")),
            patch("guild_jukebox.main.setup_logging"),
            patch("guild_jukebox.config.container.create_container") as mock_create_container,
        ):
            exit_code = main()

        assert exit_code == 1
        mock_create_container.assert_not_called()

    def test_blank_token_names_env_var(self, caplog):
        with (
            patch("guild_jukebox.config.settings.get_settings", return_value=_settings("   ")),
            patch("guild_jukebox.main.setup_logging"),
            patch("guild_jukebox.config.container.create_container") as mock_create_container,
        ):
            assert main() == 1

        mock_create_container.assert_not_called()
        assert ErrorMessages.DISCORD_TOKEN_REQUIRED in caplog.text
        assert "DISCORD__TOKEN" in caplog.text

    def test_startup_logs_playback_settings(self, caplog):
        caplog.set_level(logging.INFO, logger="guild_jukebox.main")

        with (
            patch("guild_jukebox.config.settings.get_settings", return_value=_settings()),
            patch("guild_jukebox.main.setup_logging"),
            patch("guild_jukebox.config.container.create_container"),
            patch("guild_jukebox.infrastructure.discord.bot.create_bot"),
        ):
            main()

        assert "Starting guild jukebox in test mode" in caplog.text
        assert "progress every 5.0s, disconnect grace 15.0s, queue display 10 lines" in caplog.text

    def test_main_successful_run(self):
        mock_bot = MagicMock()

        with (
            patch("guild_jukebox.config.settings.get_settings", return_value=_settings()),
            patch("guild_jukebox.main.setup_logging"),
            patch("guild_jukebox.config.container.create_container"),
            patch("guild_jukebox.infrastructure.discord.bot.create_bot", return_value=mock_bot),
        ):
            exit_code = main()

        assert exit_code == 0
        mock_bot.run_with_graceful_shutdown.assert_called_once_with("test_token_123")

    def test_main_handles_keyboard_interrupt(self):
        mock_bot = MagicMock()
        mock_bot.run_with_graceful_shutdown.side_effect = KeyboardInterrupt()

        with (
            patch("guild_jukebox.config.settings.get_settings", return_value=_settings()),
            patch("guild_jukebox.main.setup_logging"),
            patch("guild_jukebox.config.container.create_container"),
            patch("guild_jukebox.infrastructure.discord.bot.create_bot", return_value=mock_bot),
        ):
            assert main() == 0

    def test_main_handles_exception(self, caplog):
        mock_bot = MagicMock()
        mock_bot.run_with_graceful_shutdown.side_effect = RuntimeError("Bot crashed!")

        with (
            patch("guild_jukebox.config.settings.get_settings", return_value=_settings()),
            patch("guild_jukebox.main.setup_logging"),
            patch("guild_jukebox.config.container.create_container"),
            patch("guild_jukebox.infrastructure.discord.bot.create_bot", return_value=mock_bot),
        ):
            assert main() == 1

        assert "Bot exited with an unhandled error" in caplog.text
    def test_main_wires_container_and_bot(self):
        settings = _settings()
        mock_container = MagicMock()

        with (
            patch("guild_jukebox.config.settings.get_settings", return_value=settings),
            patch("guild_jukebox.main.setup_logging") as mock_setup_logging,
            patch(
                "guild_jukebox.config.container.create_container", return_value=mock_container
            ) as mock_create_container,
            patch("guild_jukebox.infrastructure.discord.bot.create_bot") as mock_create_bot,
        ):
            main()

        mock_setup_logging.assert_called_once_with("INFO")
        mock_create_container.assert_called_once_with(settings)
        mock_create_bot.assert_called_once_with(mock_container, settings)


class TestCli:
    def test_cli_exits_with_main_code(self):
        with patch("guild_jukebox.main.main", return_value=3):
            with pytest.raises(SystemExit) as exc_info:
                cli()

        assert exc_info.value.code == 3
