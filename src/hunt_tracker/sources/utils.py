"""Utility helpers for the isolated tracking worker."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

_PACKAGE_ROOT = Path(__file__).resolve().parents[2]


def worker_environment(additional: Mapping[str, str] | None = None) -> dict[str, str]:
    """Return an environment in which the worker can import this package."""

    env = dict(os.environ)
    paths = [str(_PACKAGE_ROOT)]
    existing = env.get("PYTHONPATH")
    if existing:
        paths.extend(part for part in existing.split(os.pathsep) if part)
    env["PYTHONPATH"] = os.pathsep.join(dict.fromkeys(paths))
    env["PYTHONUNBUFFERED"] = "1"
    if additional:
        env.update(additional)
    return env


__all__ = ["worker_environment"]
