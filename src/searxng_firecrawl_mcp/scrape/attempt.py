from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Attempt:
    """Outcome of one retrieval stage: content on success, a reason otherwise."""

    ok: bool
    content: str = ""
    error: str = ""

    @classmethod
    def success(cls, content: str) -> Attempt:
        return cls(ok=True, content=content)

    @classmethod
    def failure(cls, error: str) -> Attempt:
        return cls(ok=False, error=error)


def describe_error(exc: BaseException) -> str:
    detail = str(exc).strip()
    if len(detail) > 400:
        detail = detail[:400].rstrip() + "…"
    return detail or type(exc).__name__
