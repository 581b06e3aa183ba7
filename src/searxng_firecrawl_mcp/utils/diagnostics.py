"""Per-tool-call trace lines on stderr, off unless SEARXNG_MCP_DIAGNOSTICS is set."""

from __future__ import annotations

import json
import os
import sys
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Mapping

DIAGNOSTICS_ENV = "SEARXNG_MCP_DIAGNOSTICS"
DIAGNOSTICS_PREFIX = "SEARXNG_MCP_DIAG"

MAX_SAMPLE_CHARS = 2000
MAX_LINE_CHARS = 8000

_TRUTHY = {"1", "true", "yes", "on"}
_SECRET_HINTS = ("KEY", "TOKEN", "SECRET", "PASSWORD", "BEARER")


def diagnostics_enabled(env: Mapping[str, str] | None = None) -> bool:
    source = env if env is not None else os.environ
    return (source.get(DIAGNOSTICS_ENV) or "").strip().lower() in _TRUTHY


def mask_secrets(values: Mapping[str, str | None]) -> dict[str, str]:
    """Replace secret-looking values by their length; unset values become ''."""
    masked: dict[str, str] = {}
    for key, value in values.items():
        if not value:
            masked[key] = ""
        elif any(hint in key.upper() for hint in _SECRET_HINTS):
            masked[key] = f"*** ({len(value)})"
        else:
            masked[key] = value
    return masked


def sample_text(text: str, limit: int = MAX_SAMPLE_CHARS) -> dict[str, Any]:
    if len(text) <= limit:
        return {"sample": text, "sample_len": len(text), "sample_truncated": False}
    return {
        "sample": text[:limit] + "...(truncated)",
        "sample_len": len(text),
        "sample_truncated": True,
    }


def render_line(entry: dict[str, Any]) -> str:
    # Oversized or unencodable payloads collapse to a note; the header survives.
    header = {key: entry.get(key) for key in ("request_id", "tool", "stage", "msg", "elapsed_ms")}
    try:
        payload = json.dumps(entry, ensure_ascii=True, separators=(",", ":"), default=str)
    except ValueError:
        note: dict[str, Any] = {"note": "diagnostic payload could not be encoded"}
    else:
        if len(payload) <= MAX_LINE_CHARS:
            return f"{DIAGNOSTICS_PREFIX} {payload}"
        note = {"note": "diagnostic payload truncated", "original_len": len(payload)}
    payload = json.dumps(
        {**header, "line_truncated": True, "data": note},
        ensure_ascii=True,
        separators=(",", ":"),
        default=str,
    )
    return f"{DIAGNOSTICS_PREFIX} {payload}"


@dataclass(frozen=True)
class Diagnostics:
    """Trace of one tool call; every stage shares the call's request id."""

    tool: str
    enabled: bool
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started: float = field(default_factory=time.monotonic)

    def emit(self, stage: str, msg: str, data: dict[str, Any] | None = None) -> None:
        if not self.enabled:
            return
        entry = {
            "request_id": self.request_id,
            "tool": self.tool,
            "stage": stage,
            "msg": msg,
            "elapsed_ms": int((time.monotonic() - self.started) * 1000),
            "data": data or {},
        }
        # stdout carries the MCP stream.
        try:
            sys.stderr.write(render_line(entry) + "\n")
            sys.stderr.flush()
        except OSError:
            return
