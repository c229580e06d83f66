"""
Consolidate a Codex event stream into one Responses API JSON document.

The backend only streams. For callers that asked for a plain JSON response
the proxy reads the full stream and returns the ``response`` object carried by
the terminal event, which is what a non-streaming call would have produced.
"""
import json
import logging
from typing import Any, Dict, List

from .sse_parser import parse_sse_text

logger = logging.getLogger(__name__)

TERMINAL_EVENT_TYPES = {
    "response.completed",
    "response.done",
    "response.incomplete",
    "response.failed",
}


class ConsolidationError(ValueError):
    """The stream could not be turned into a single response"""


def consolidate_sse(text: str, request_id: str = "-") -> Dict[str, Any]:
    """
    Build the final response object from a complete event-stream body.

    Args:
        text: Entire upstream body
        request_id: Request ID for logging

    Returns:
        The terminal event's ``response`` object. If it carries no output,
        the items seen in ``response.output_item.done`` events fill it in,
        or failing those one assistant message built from the text deltas.

    Raises:
        ConsolidationError: On undecodable events or a missing terminal event
    """
    output_items: List[Dict[str, Any]] = []
    text_parts: List[str] = []
    event_count = 0

    for event in parse_sse_text(text):
        try:
            payload = event.json()
        except ValueError as e:
            raise ConsolidationError(f"Undecodable SSE event: {e}") from e
        if payload is None:
            continue

        event_count += 1
        event_type = payload.get("type") or event.event

        if event_type == "response.output_text.delta":
            delta = payload.get("delta")
            if isinstance(delta, str):
                text_parts.append(delta)

        elif event_type == "response.output_item.done":
            item = payload.get("item")
            if isinstance(item, dict):
                output_items.append(item)

        elif event_type in TERMINAL_EVENT_TYPES:
            response = payload.get("response")
            if not isinstance(response, dict):
                raise ConsolidationError(f"Terminal event {event_type} has no response object")

            if not response.get("output"):
                if output_items:
                    response["output"] = output_items
                elif text_parts:
                    response["output"] = [_text_message("".join(text_parts))]

            logger.debug(
                f"[{request_id}] Consolidated {event_count} events "
                f"({len(output_items)} output items, {len(''.join(text_parts))} text chars) via {event_type}"
            )
            return response

    raise ConsolidationError(f"Stream ended without a terminal event after {event_count} events")


def _text_message(text: str) -> Dict[str, Any]:
    return {
        "type": "message",
        "role": "assistant",
        "content": [{"type": "output_text", "text": text, "annotations": []}],
    }


def dumps_response(response: Dict[str, Any]) -> bytes:
    """Serialize a consolidated response for the client"""
    return json.dumps(response, ensure_ascii=False).encode("utf-8")
