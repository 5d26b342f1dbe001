import logging

from quiz_log import log_action, logger


def test_log_action_writes_structured_line(action_log):
    log_action("ADD", "[1] Q: Capital of Italy", user="127.0.0.1:5000")
    for h in logger.handlers:
        h.flush()
    line = action_log.read_text(encoding="utf-8").strip().splitlines()[-1]
    assert line.endswith("| 127.0.0.1:5000 | ADD | [1] Q: Capital of Italy")


def test_plain_records_are_formatted(action_log):
    logging.getLogger("quiz").warning("storage failure on '%s'", "list")
    for h in logger.handlers:
        h.flush()
    assert "| WARNING | storage failure on 'list'" in action_log.read_text(encoding="utf-8")


def test_setup_is_idempotent(action_log):
    from quiz_log import setup_logging

    setup_logging(str(action_log.parent))
    assert len(logger.handlers) == 1
