"""Secret hygiene: redaction, output-path checks, logging suppression.

No raw key may reach a log line, cache listing, table or JSON document.
Vendor error bodies sometimes echo the credential back, so error text built
from a reply is passed through scrub() before it leaves the aggregator.
"""

from __future__ import annotations

import hashlib
import logging
import os
import stat
from enum import Enum
from pathlib import Path

# Keys this short are masked entirely; showing 4+4 characters would reveal most of them
MIN_PARTIAL_LENGTH = 9
VISIBLE_CHARS = 4

CHATTY_LOGGERS = ("httpx", "httpcore")


class RedactionLevel(Enum):
    PARTIAL = "partial"   # sk-a...1234
    FULL = "full"         # [REDACTED]
    HASH = "hash"         # [sha256:abcd1234ef56]


def suppress_credential_logging() -> None:
    """Raise the HTTP stack loggers to WARNING so request headers never get logged."""
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _fingerprint(secret: str) -> str:
    return hashlib.sha256(secret.encode()).hexdigest()[:12]


def redact_key(key: str, level: RedactionLevel = RedactionLevel.PARTIAL) -> str:
    if level is RedactionLevel.FULL:
        return "[REDACTED]"
    if level is RedactionLevel.HASH:
        return f"[sha256:{_fingerprint(key)}]"
    if len(key) < MIN_PARTIAL_LENGTH:
        return "*" * len(key)
    return f"{key[:VISIBLE_CHARS]}...{key[-VISIBLE_CHARS:]}"


def scrub(text: str, secret: str) -> str:
    """Replace every occurrence of `secret` in `text` with its redacted form."""
    if not secret or secret not in text:
        return text
    return text.replace(secret, redact_key(secret))


def _world_readable(path: Path) -> bool:
    return bool(os.stat(path).st_mode & stat.S_IROTH)


def check_output_permissions(path: Path, force: bool = False) -> bool:
    """Whether a balance report may be written to `path`.

    Symlinks are always refused. A world-readable file (or, for a new file, a
    world-readable directory) is only accepted with `force`.
    """
    if path.is_symlink():
        return False
    target = path if path.exists() else path.parent
    if target.exists() and _world_readable(target):
        return force
    return True
