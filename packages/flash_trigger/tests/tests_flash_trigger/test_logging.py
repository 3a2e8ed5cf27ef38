import logging

from flash_trigger.logging import (
    TraceFormatter,
    emit_log_entry,
    get_logger,
    reset_run_id,
    run_id,
    scoped_run_id,
    set_run_id,
    setup_logging,
)
from flash_trigger.resolver import LogEntry
from flash_trigger.schemas import DataflowErrorKind, ErrorStrategy, LogLevel


def _record(message="hello"):
    record = logging.LogRecord(
        name="flash_trigger.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    record.created = 0
    record.msecs = 0
    return record


def test_formatter_injects_run_id():
    formatter = TraceFormatter("%(trace_str)s%(message)s")

    assert formatter.format(_record()) == "hello"
    with scoped_run_id("run-42"):
        assert formatter.format(_record()) == "[run-42] hello"
    assert run_id.get() is None


def test_formatter_uses_utc_iso_timestamps():
    formatter = TraceFormatter("%(asctime)s")

    assert formatter.format(_record()) == "1970-01-01 00:00:00.000Z"


def test_set_and_reset_run_id():
    token = set_run_id("run-1")
    assert run_id.get() == "run-1"

    reset_run_id(token)
    assert run_id.get() is None


def test_setup_logging_with_file(tmp_path, restore_engine_logger):
    log_file = tmp_path / "logs" / "trigger.log"

    setup_logging(level="debug", log_file=log_file)
    get_logger("flash_trigger.cron").debug("written to file")
    for handler in restore_engine_logger.handlers:
        handler.flush()

    assert restore_engine_logger.level == logging.DEBUG
    assert len(restore_engine_logger.handlers) == 2
    assert restore_engine_logger.propagate is False
    assert "written to file" in log_file.read_text(encoding="utf-8")


def test_setup_logging_is_repeatable(restore_engine_logger):
    setup_logging()
    setup_logging()

    assert len(restore_engine_logger.handlers) == 1


def test_emit_log_entry_levels(caplog):
    logger = logging.getLogger("flash_trigger.test.dataflow")
    warning = LogEntry(
        level=LogLevel.WARN,
        error_kind=DataflowErrorKind.NULL_VALUE,
        strategy=ErrorStrategy.SKIP,
        message="nullValue: update skipped",
    )
    error = LogEntry(
        level=LogLevel.ERROR,
        error_kind=DataflowErrorKind.EXPIRED,
        strategy=ErrorStrategy.USE_PREVIOUS_VALUE,
        message="expired: no previous value to fall back to",
    )

    with caplog.at_level(logging.WARNING, logger="flash_trigger.test.dataflow"):
        emit_log_entry(warning, logger)
        emit_log_entry(error, logger)

    assert [r.levelno for r in caplog.records] == [logging.WARNING, logging.ERROR]
    assert caplog.records[0].error_kind == "nullValue"
    assert caplog.records[1].strategy == "usePreviousValue"
    assert "no previous value" in caplog.text


def test_emit_log_entry_default_logger(caplog):
    entry = LogEntry(
        level=LogLevel.WARN,
        error_kind=DataflowErrorKind.ZERO_VALUE,
        strategy=ErrorStrategy.VALUE_REPLACE,
        message="zeroValue: updated with replacement 1",
    )

    with caplog.at_level(logging.WARNING, logger="flash_trigger.dataflow"):
        emit_log_entry(entry)

    assert caplog.records[0].name == "flash_trigger.dataflow"
