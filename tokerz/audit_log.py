"""Structured JSON-lines log of balance lookups.

Entries are buffered in memory and appended on flush(); the file is rotated
once it grows past MAX_SIZE. Keys are only ever recorded redacted.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


class AuditLog:
    """Append-only event log with size rotation."""

    MAX_SIZE = 10 * 1024 * 1024  # 10 MB
    # Buffered entries are written out once this many accumulate
    BUFFER_LIMIT = 50

    def __init__(self, path: Path):
        self.path = path
        self._entries: list[dict] = []

    def log(
        self,
        event: str,
        vendor: str = "",
        key: str = "",
        balance: Optional[float] = None,
        currency: str = "",
        error: str = "",
        latency_ms: float = 0.0,
    ) -> None:
        """Buffer one event. `key` must already be redacted. Empty fields are omitted."""
        fields = {
            "vendor": vendor,
            "key": key,
            "balance": balance,
            "currency": currency,
            "error": error,
            "latency_ms": round(latency_ms, 2) if latency_ms else None,
        }
        stamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
        self._entries.append(
            {"ts": stamp, "event": event, **{k: v for k, v in fields.items() if v not in (None, "")}}
        )
        if len(self._entries) >= self.BUFFER_LIMIT:
            self.flush()

    def _rotate(self) -> None:
        if self.path.exists() and self.path.stat().st_size > self.MAX_SIZE:
            self.path.replace(self.path.with_name(self.path.name + ".1"))

    def flush(self) -> None:
        pending, self._entries = self._entries, []
        if not pending or self.path.is_symlink():
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._rotate()
        lines = "".join(json.dumps(e, ensure_ascii=False) + "\n" for e in pending)
        with self.path.open("a") as f:
            f.write(lines)

    @property
    def entry_count(self) -> int:
        return len(self._entries)
