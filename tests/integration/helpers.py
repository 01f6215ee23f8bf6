"""Helpers shared by end-to-end collector tests."""

from __future__ import annotations

import json

import httpx

SHARED_SECRET = "fleet-secret"
AUTH_HEADERS = {"Authorization": f"Bearer {SHARED_SECRET}"}


def chat_completion(verdict: dict[str, object]) -> httpx.Response:
    """Return an OpenAI-style completion whose content is ``verdict`` JSON."""
    return httpx.Response(
        200,
        json={
            "id": "cmpl-1",
            "choices": [
                {"index": 0, "message": {"role": "assistant", "content": json.dumps(verdict)}}
            ],
        },
    )
