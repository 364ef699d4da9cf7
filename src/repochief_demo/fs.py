"""Filesystem helpers — slugs, timestamps, atomic writes."""

from __future__ import annotations

import json
import os
import re
import tempfile
from datetime import datetime
from typing import Any


def slugify(text: str, max_len: int = 40) -> str:
    """Convert text to a filesystem-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug[:max_len]


def file_timestamp() -> str:
    """ISO timestamp with ':' and '.' replaced: 2026-02-19T14-30-22-123456."""
    return re.sub(r"[:.]", "-", datetime.now().isoformat())


def atomic_write_file(path: str, content: str) -> str:
    """Write content to path atomically (write-to-temp, then rename).

    Returns the final path.
    """
    d = os.path.dirname(path)
    os.makedirs(d, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=d, suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise
    return path


def write_json(path: str, data: dict[str, Any]) -> str:
    return atomic_write_file(path, json.dumps(data, indent=2, default=str) + "\n")
