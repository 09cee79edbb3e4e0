import json
import logging

from app.core.logging import ContextFilter, DevelopmentFormatter, LogContext, StructuredFormatter


def _record(message="hello", **extra):
    record = logging.LogRecord("billhabit.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    ContextFilter().filter(record)
    return record


def test_context_is_attached_and_restored():
    with LogContext(account_id="acc1"):
        with LogContext(quote_id="q1"):
            inner = _record()
        outer = _record()
    after = _record()

    assert (inner.account_id, inner.quote_id) == ("acc1", "q1")
    assert outer.account_id == "acc1" and not hasattr(outer, "quote_id")
    assert not hasattr(after, "account_id")


def test_explicit_extra_wins_over_context():
    with LogContext(account_id="from-context"):
        record = _record(account_id="explicit")
    assert record.account_id == "explicit"


def test_structured_formatter_emits_context_fields():
    with LogContext(account_id="acc1", customer_id="c9"):
        payload = json.loads(StructuredFormatter().format(_record("Quote created")))

    assert payload["message"] == "Quote created"
    assert payload["level"] == "INFO"
    assert payload["account_id"] == "acc1"
    assert payload["customer_id"] == "c9"
    assert "quote_id" not in payload


def test_development_formatter_shortens_context_keys():
    with LogContext(account_id="acc1"):
        line = DevelopmentFormatter().format(_record("Sweep finished"))
    assert "Sweep finished" in line
    assert "[account=acc1]" in line
