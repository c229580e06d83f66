"""Input item rewriting for the stateless (store=false) Codex backend"""

from typing import Any, Dict, List, Optional

# Items that point at server-side state; a stateless backend cannot resolve them
UNSUPPORTED_ITEM_TYPES = {"item_reference"}


def filter_input(input_items: Any) -> Any:
    """
    Drop unsupported items and strip every item's ``id``.

    Order and duplicates are preserved. Non-list input is returned untouched.

    Args:
        input_items: Responses API input items from the caller

    Returns:
        Filtered copy of the items
    """
    if not isinstance(input_items, list):
        return input_items

    filtered: List[Any] = []
    for item in input_items:
        if not isinstance(item, dict):
            filtered.append(item)
            continue
        if item.get("type") in UNSUPPORTED_ITEM_TYPES:
            continue
        if "id" in item:
            item = {key: value for key, value in item.items() if key != "id"}
        filtered.append(item)
    return filtered


def build_tool_guide_message(text: str) -> Dict[str, Any]:
    """Developer message carrying environment-override guidance"""
    return {
        "type": "message",
        "role": "developer",
        "content": [
            {
                "type": "input_text",
                "text": text,
            }
        ],
    }


def add_tool_guide_message(
    input_items: Any,
    has_tools: bool,
    message_text: Optional[str],
) -> Any:
    """Prepend the guidance message when tools are present and text is set"""
    if not has_tools or not isinstance(input_items, list) or not message_text:
        return input_items
    return [build_tool_guide_message(message_text), *input_items]
