from __future__ import annotations

import json
import logging
from typing import Any

from proxy.error_log import ErrorLogger, ProxyErrorRecord


def _record(**overrides: Any) -> ProxyErrorRecord:
    fields: dict[str, Any] = {
        "traceId": "trace-1",
        "url": "https://upstream.test/codex/responses",
        "status": 429,
        "statusText": "Too Many Requests",
        "model": "gpt-5",
        "hasTools": False,
        "bodyLength": 12,
        "responseBody": "slow down",
    }
    fields.update(overrides)
    return ProxyErrorRecord(**fields)


def test_appends_one_ndjson_line_per_record(tmp_path: Any) -> None:
    path = tmp_path / "logs" / "errors.ndjson"
    error_logger = ErrorLogger(str(path))

    error_logger.log(_record())
    error_logger.log(_record(traceId="trace-2"))

    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["traceId"] for line in lines] == ["trace-1", "trace-2"]
    first = json.loads(lines[0])
    assert first["statusText"] == "Too Many Requests"
    assert first["bodyLength"] == 12
    assert first["timestamp"].endswith("Z")


def test_response_body_is_truncated(tmp_path: Any) -> None:
    record = _record(responseBody="x" * 10_000)
    assert len(record.response_body) == 8000


def test_console_line_is_concise(tmp_path: Any, caplog: Any) -> None:
    error_logger = ErrorLogger(str(tmp_path / "errors.ndjson"))
    with caplog.at_level(logging.ERROR):
        error_logger.log(_record(responseBody="line1\nline2" + "y" * 1000))

    message = caplog.records[-1].getMessage()
    assert "429 Too Many Requests model=gpt-5" in message
    assert "line1 line2" in message
    assert "y" * 400 not in message


def test_write_failure_only_warns(tmp_path: Any, caplog: Any) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    error_logger = ErrorLogger(str(blocker / "errors.ndjson"))

    with caplog.at_level(logging.WARNING):
        error_logger.log(_record())

    assert "Failed to write proxy error log" in caplog.text
