"""
NDJSON log of non-2xx upstream responses.

One JSON object per line, appended to a local file. Failures to write are
warned about and otherwise ignored; the client response is never affected.
"""
import logging
import os
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

MAX_RESPONSE_BODY_CHARS = 8000
CONSOLE_PREVIEW_CHARS = 400


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ProxyErrorRecord(BaseModel):
    """One failed upstream call"""
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = Field(default_factory=_utc_timestamp)
    trace_id: str = Field(alias="traceId")
    url: str
    status: int
    status_text: str = Field(default="", alias="statusText")
    model: Optional[str] = None
    has_tools: bool = Field(default=False, alias="hasTools")
    body_length: Optional[int] = Field(default=None, alias="bodyLength")
    response_body: str = Field(default="", alias="responseBody")
    had_instructions: Optional[bool] = Field(default=None, alias="hadInstructions")
    instr_length: Optional[int] = Field(default=None, alias="instrLength")
    include: Optional[Any] = None

    @field_validator("response_body")
    @classmethod
    def truncate_body(cls, value: str) -> str:
        return value[:MAX_RESPONSE_BODY_CHARS]

    def to_json_line(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True) + "\n"


class ErrorLogger:
    """Appends ProxyErrorRecord lines to ``log_path``"""

    def __init__(self, log_path: str):
        self.log_path = log_path

    def log(self, record: ProxyErrorRecord) -> None:
        try:
            parent = os.path.dirname(self.log_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(record.to_json_line())

            trimmed = record.response_body[:CONSOLE_PREVIEW_CHARS].replace("\n", " ")
            logger.error(
                f"{record.status} {record.status_text} model={record.model or '?'} "
                f"url={record.url} trace={record.trace_id} body={trimmed}"
            )
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to write proxy error log {self.log_path}: {e}")
