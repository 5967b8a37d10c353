"""Tests for the command-line entry point."""

from unittest.mock import AsyncMock, Mock, patch

import pytest
import requests

from config import DEFAULT_CONFIG
import main


class TestParser:

    def test_listen_defaults(self):
        args = main.build_parser().parse_args(["listen"])
        assert args.command == "listen"
        assert args.sniper_url is None
        assert args.no_filter is False

    def test_listen_trades_leaderboard(self):
        args = main.build_parser().parse_args(["listen-trades", "--leaderboard", "--top", "5"])
        assert args.leaderboard is True
        assert args.top == 5

    def test_command_required(self):
        with pytest.raises(SystemExit):
            main.build_parser().parse_args([])


class TestHealth:

    def test_prints_response_json(self, capsys):
        response = Mock(ok=True, status_code=200)
        response.json.return_value = {"status": "ok", "slot": 42}

        with patch("main.requests.get", return_value=response) as get:
            assert main.check_health("http://sniper:6969/") == 0

        get.assert_called_once_with("http://sniper:6969/health", timeout=5.0)
        assert capsys.readouterr().out.strip() == '{"status": "ok", "slot": 42}'

    def test_error_status_still_prints_body(self, capsys):
        response = Mock(ok=False, status_code=503)
        response.json.return_value = {"status": "degraded", "rpc": "down"}

        with patch("main.requests.get", return_value=response):
            assert main.check_health("http://sniper:6969") == 1

        assert capsys.readouterr().out.strip() == '{"status": "degraded", "rpc": "down"}'

    def test_non_json_body_printed_as_text(self, capsys):
        response = Mock(ok=True, status_code=200, text="OK")
        response.json.side_effect = ValueError("not json")

        with patch("main.requests.get", return_value=response):
            assert main.check_health("http://sniper:6969") == 0

        assert capsys.readouterr().out.strip() == "OK"

    def test_unreachable(self):
        with patch("main.requests.get", side_effect=requests.ConnectionError("refused")):
            assert main.check_health("http://sniper:6969") == 1


class TestMain:

    def test_transport_error_exits_nonzero(self):
        async def failing_listen(config, sniper_url, filter_enabled):
            raise main.TransportError("refused")

        with patch("main.load_config", return_value=dict(DEFAULT_CONFIG)), \
                patch("main.listen", failing_listen):
            assert main.main(["listen"]) == 1


class TestSetupLogging:

    def test_loguru_follows_log_level(self):
        with patch("main.loguru_logger") as loguru_logger, patch("main.logging.basicConfig"):
            main.setup_logging("warning")

        loguru_logger.remove.assert_called_once_with()
        loguru_logger.add.assert_called_once_with(main.sys.stderr, level="WARNING")

    def test_unknown_level_falls_back_to_info(self):
        with patch("main.loguru_logger") as loguru_logger, patch("main.logging.basicConfig") as basic_config:
            main.setup_logging("chatty")

        assert basic_config.call_args.kwargs["level"] == main.logging.INFO
        loguru_logger.add.assert_called_once_with(main.sys.stderr, level="INFO")


class TestModeRouting:

    @pytest.mark.asyncio
    async def test_listen_pipeline_ignores_trades(self):
        with patch("main.FeedPipeline") as pipeline_cls:
            pipeline_cls.return_value.run = AsyncMock()
            pipeline_cls.return_value.stats = {}
            await main.listen(dict(DEFAULT_CONFIG), "http://sniper:6969", filter_enabled=False)

        assert pipeline_cls.call_args.kwargs["handle_trades"] is False

    @pytest.mark.asyncio
    async def test_listen_trades_pipeline_ignores_listings(self):
        with patch("main.FeedPipeline") as pipeline_cls:
            pipeline_cls.return_value.run = AsyncMock()
            pipeline_cls.return_value.stats = {}
            await main.listen_trades(dict(DEFAULT_CONFIG), leaderboard_mode=False, top=5)

        assert pipeline_cls.call_args.kwargs["handle_listings"] is False
