import logging

from evenza_api.app.core.logging_config import NOISY_LOGGERS, UVICORN_LOGGERS, setup_logging


def test_uvicorn_loggers_propagate_to_root() -> None:
    logging.getLogger("uvicorn.access").addHandler(logging.NullHandler())
    setup_logging("DEBUG")
    for name in UVICORN_LOGGERS:
        server_logger = logging.getLogger(name)
        assert server_logger.handlers == []
        assert server_logger.propagate is True
    assert logging.getLogger().level == logging.DEBUG


def test_handlers_are_attached_once() -> None:
    setup_logging("INFO")
    setup_logging("INFO")
    named = [handler for handler in logging.getLogger().handlers if handler.get_name() == "evenza"]
    assert len(named) == 1


def test_aws_loggers_are_capped_at_warning() -> None:
    setup_logging("DEBUG")
    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
