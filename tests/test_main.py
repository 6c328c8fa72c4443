import logging

import pytest

import main
from price_predictor.exceptions import FeedUnavailable


def test_parse_defaults():
    args = main.parse_arguments([])
    assert args.once is False
    assert args.interval is None
    assert args.log_level is None


def test_overrides_win_over_settings(settings):
    args = main.parse_arguments(["--interval", "5", "--timeout", "3", "--log-level", "INFO"])
    updated = main.apply_overrides(settings, args)
    assert updated.POLL_INTERVAL == 5.0
    assert updated.REQUEST_TIMEOUT == 3.0
    assert updated.LOG_LEVEL == "INFO"
    assert settings.POLL_INTERVAL == 30.0


def test_no_overrides_returns_same_settings(settings):
    assert main.apply_overrides(settings, main.parse_arguments([])) is settings


def test_rejects_non_positive_interval():
    with pytest.raises(SystemExit):
        main.parse_arguments(["--interval", "0"])


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "predictor.log"
    root_logger = logging.getLogger()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    try:
        main.setup_logging("WARNING", log_file=str(log_file))
        logging.getLogger("price_feed").debug("debug line")
        for handler in root_logger.handlers:
            handler.flush()
        assert "debug line" in log_file.read_text(encoding="utf-8")
        assert logging.getLogger("httpx").level == logging.WARNING
    finally:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root_logger.addHandler(handler)
        root_logger.setLevel(saved_level)


@pytest.mark.asyncio
async def test_once_failure_prints_error_and_exits_1(monkeypatch, capsys):
    async def failing_fetch(settings):
        raise FeedUnavailable("HTTP 503")

    monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(main, "fetch_once", failing_fetch)

    assert await main.main(["--once"]) == 1
    assert "Error: Could not fetch EGLD price." in capsys.readouterr().out
