"""Remap Codex function-call names onto Claude Code tool names"""

import re
from typing import Any, Dict, Optional

TOOL_NAME_MAP: Dict[str, str] = {
    # planning
    "todo_write": "TodoWrite",
    "todowrite": "TodoWrite",
    "todo_read": "TodoRead",
    "todoread": "TodoRead",
    "exit_plan_mode": "exit_plan_mode",
    # files / search
    "ls": "LS",
    "glob": "Glob",
    "grep": "Grep",
    "read": "Read",
    "write": "Write",
    "edit": "Edit",
    "multi_edit": "MultiEdit",
    "multiedit": "MultiEdit",
    # notebooks
    "notebook_read": "NotebookRead",
    "notebookedit": "NotebookEdit",
    "notebook_edit": "NotebookEdit",
    # shell
    "bash": "Bash",
    # web
    "web_fetch": "WebFetch",
    "webfetch": "WebFetch",
    "web_search": "WebSearch",
    "websearch": "WebSearch",
    # agent
    "task": "Task",
}

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def _canonical_key(name: Any) -> Optional[str]:
    if not isinstance(name, str) or not name:
        return None
    return _NON_ALNUM.sub("_", name.strip().lower())


def remap_tool_name(name: Any) -> Optional[str]:
    """Claude Code name for a tool, or None when there is no mapping"""
    key = _canonical_key(name)
    if key is None:
        return None
    return TOOL_NAME_MAP.get(key)


def normalize_tool_names(response: Dict[str, Any]) -> Dict[str, Any]:
    """Rename function_call items in a consolidated response in place"""
    output = response.get("output") if isinstance(response, dict) else None
    if not isinstance(output, list):
        return response

    for item in output:
        if isinstance(item, dict) and item.get("type") == "function_call":
            mapped = remap_tool_name(item.get("name"))
            if mapped:
                item["name"] = mapped
    return response
