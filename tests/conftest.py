"""Test configuration helpers."""

from __future__ import annotations

import os
import sys
from pathlib import Path

os.environ.setdefault("JSONTOKEN_SECRET_KEY", "test-secret-key-0123456789")
os.environ.setdefault("ENVIRONMENT", "test")


def _ensure_project_root_on_path() -> None:
    """Add the repository root to ``sys.path`` when running ``pytest`` as a script."""

    root = Path(__file__).resolve().parents[1]
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_ensure_project_root_on_path()
