"""Tests for logging setup and credential redaction."""

from __future__ import annotations

import json
import logging

from news_relay.config import LoggingConfig
from news_relay.logging_utils import JsonlFormatter, log_event, redact_url, setup_logging


def test_redact_url_masks_credential_params():
    url = "https://gnews.io/api/v4/search?sortby=publishedAt&token=abc123&q=bitcoin"

    assert redact_url(url) == "https://gnews.io/api/v4/search?sortby=publishedAt&token=[REDACTED]&q=bitcoin"
    assert "secret" not in redact_url("https://newsapi.org/v2/everything?apiKey=secret")


def test_jsonl_formatter_includes_extra_fields():
    record = logging.LogRecord("news_relay", logging.INFO, __file__, 1, "served", None, None)
    record.provider = "gnews"
    record.status_code = 200

    payload = json.loads(JsonlFormatter().format(record))

    assert payload["message"] == "served"
    assert payload["provider"] == "gnews"
    assert payload["status_code"] == 200


def test_setup_logging_writes_jsonl_file(tmp_path):
    cfg = LoggingConfig(console=False, file=True, format="jsonl", filename="relay.jsonl")

    logger = setup_logging(cfg, tmp_path)
    log_event(logger, "Relayed provider response", provider="newsapi")
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "relay.jsonl").read_text(encoding="utf-8").splitlines()
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []
    assert json.loads(lines[-1])["provider"] == "newsapi"


def test_log_event_ignores_missing_logger():
    log_event(None, "nothing happens", provider="gnews")
