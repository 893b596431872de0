from __future__ import annotations

from typing import List


def get_openapi_tags() -> List[dict]:
    return [
        {"name": "direct-message-rooms", "description": "Two-party conversations, their messages and hide cursors"},
        {"name": "direct-message-logs", "description": "Single messages: read and like"},
        {"name": "health", "description": "Health checks"},
    ]
