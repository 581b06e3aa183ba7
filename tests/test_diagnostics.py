from __future__ import annotations

import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from searxng_firecrawl_mcp.utils.diagnostics import (
    DIAGNOSTICS_PREFIX,
    MAX_LINE_CHARS,
    Diagnostics,
    diagnostics_enabled,
    mask_secrets,
    render_line,
    sample_text,
)


def _entries(stderr: str) -> list[dict]:
    prefix = f"{DIAGNOSTICS_PREFIX} "
    return [json.loads(line[len(prefix) :]) for line in stderr.splitlines() if line.startswith(prefix)]


def test_diagnostics_enabled_truthy_values() -> None:
    assert diagnostics_enabled({"SEARXNG_MCP_DIAGNOSTICS": "1"})
    assert diagnostics_enabled({"SEARXNG_MCP_DIAGNOSTICS": " On "})
    assert not diagnostics_enabled({"SEARXNG_MCP_DIAGNOSTICS": "0"})
    assert not diagnostics_enabled({})


def test_mask_secrets_masks_only_secret_keys() -> None:
    masked = mask_secrets({"FIRECRAWL_KEY": "abcd", "SEARXNG_URL": "http://x", "SEARXNG_KEY": None})

    assert masked == {"FIRECRAWL_KEY": "*** (4)", "SEARXNG_URL": "http://x", "SEARXNG_KEY": ""}


def test_sample_text_truncates_long_bodies() -> None:
    assert sample_text("abc", 5) == {"sample": "abc", "sample_len": 3, "sample_truncated": False}
    assert sample_text("abcdef", 3) == {
        "sample": "abc...(truncated)",
        "sample_len": 6,
        "sample_truncated": True,
    }


def test_emit_writes_prefixed_json_line_to_stderr(capsys) -> None:
    diag = Diagnostics(tool="scrape", enabled=True, request_id="req-1")

    diag.emit("scrape.fallback", "Fetching URL directly", {"url": "http://e.com"})

    captured = capsys.readouterr()
    assert captured.out == ""
    [entry] = _entries(captured.err)
    assert entry["request_id"] == "req-1"
    assert entry["tool"] == "scrape"
    assert entry["stage"] == "scrape.fallback"
    assert entry["data"] == {"url": "http://e.com"}


def test_emit_disabled_is_noop(capsys) -> None:
    diag = Diagnostics(tool="search", enabled=False)

    diag.emit("search.request", "Querying SearXNG", {"params": {"q": "x"}})

    captured = capsys.readouterr()
    assert captured.err == ""
    assert captured.out == ""


def test_oversized_entry_is_replaced_with_marker() -> None:
    line = render_line(
        {
            "request_id": "req-1",
            "tool": "scrape",
            "stage": "scrape.fallback_ok",
            "msg": "Direct fetch succeeded",
            "elapsed_ms": 3,
            "data": {"sample": "x" * (MAX_LINE_CHARS + 10)},
        }
    )

    [entry] = _entries(line)
    assert entry["line_truncated"] is True
    assert entry["stage"] == "scrape.fallback_ok"
    assert entry["data"]["note"] == "diagnostic payload truncated"
    assert len(line) < MAX_LINE_CHARS


def test_unencodable_values_are_stringified() -> None:
    line = render_line({"request_id": "req-1", "data": {"when": object()}})

    [entry] = _entries(line)
    assert entry["data"]["when"].startswith("<object object")


def test_each_call_gets_a_fresh_request_id() -> None:
    first = Diagnostics(tool="search", enabled=False)
    second = Diagnostics(tool="search", enabled=False)

    assert first.request_id != second.request_id


def test_stages_of_one_call_share_request_id(capsys) -> None:
    diag = Diagnostics(tool="search", enabled=True)

    diag.emit("tool.invoke", "Tool call received")
    diag.emit("tool.done", "Tool call succeeded", {"text_len": 2})

    entries = _entries(capsys.readouterr().err)
    assert [entry["stage"] for entry in entries] == ["tool.invoke", "tool.done"]
    assert {entry["request_id"] for entry in entries} == {diag.request_id}
