"""
Event-stream framing for Codex responses.

Only the ``event`` and ``data`` fields matter to the proxy; ``id``/``retry``
fields and comment lines are skipped.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class SSEEvent:
    """One dispatched event: optional name plus its joined data lines"""
    event: Optional[str]
    data: str

    def json(self) -> Optional[Dict[str, Any]]:
        """Decode the data field as a JSON object, None for ``[DONE]``.

        Raises:
            ValueError: If the data is not a JSON object
        """
        if self.data.strip() == "[DONE]":
            return None
        payload = json.loads(self.data)
        if not isinstance(payload, dict):
            raise ValueError(f"SSE data is not a JSON object: {self.data[:100]}")
        return payload


@dataclass
class SSEParser:
    """Feed text in arbitrary pieces, get back whole events"""
    _pending: str = ""
    _name: Optional[str] = None
    _data: List[str] = field(default_factory=list)

    def feed(self, chunk: str) -> List[SSEEvent]:
        if not chunk:
            return []
        lines = (self._pending + chunk).split("\n")
        # The last piece has no newline yet
        self._pending = lines.pop()

        events: List[SSEEvent] = []
        for line in lines:
            self._handle_line(line, events)
        return events

    def flush(self) -> List[SSEEvent]:
        """Dispatch whatever is left once the stream has ended"""
        events: List[SSEEvent] = []
        if self._pending:
            self._handle_line(self._pending, events)
            self._pending = ""
        self._dispatch(events)
        return events

    def _handle_line(self, line: str, events: List[SSEEvent]) -> None:
        line = line.rstrip("\r")
        if not line:
            self._dispatch(events)
            return
        if line.startswith(":"):
            return

        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if name == "event":
            self._name = value
        elif name == "data":
            self._data.append(value)

    def _dispatch(self, events: List[SSEEvent]) -> None:
        if self._name is not None or self._data:
            events.append(SSEEvent(event=self._name, data="\n".join(self._data)))
        self._name = None
        self._data = []


def parse_sse_text(text: str) -> List[SSEEvent]:
    """Parse a complete event-stream body."""
    parser = SSEParser()
    return parser.feed(text) + parser.flush()
