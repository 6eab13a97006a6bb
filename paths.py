# -*- coding: utf-8 -*-
########################
# paths.py
########################
# Purpose:
# - Central filesystem path helpers for the app.
# - Defines where the bundled chart lives relative to the project root.
#
# Design notes:
# - Keep path derivation consistent across modules.
# - No Qt usage. Return pathlib.Path only.
#
########################
# Interfaces:
# Public functions:
# - app_root_dir() -> pathlib.Path
# - assets_dir() -> pathlib.Path
# - default_chart_path() -> pathlib.Path
# - resolve_chart_path(configured_path: str) -> pathlib.Path
#
########################

from __future__ import annotations

from pathlib import Path


def app_root_dir() -> Path:
    """Return the directory holding the application modules."""
    return Path(__file__).resolve().parent


def assets_dir() -> Path:
    """Return the bundled assets directory (not created automatically)."""
    return app_root_dir() / "assets"


def default_chart_path() -> Path:
    return assets_dir() / "keyTimings.json"


def resolve_chart_path(configured_path: str) -> Path:
    """Relative chart paths resolve against the application root, empty means the bundled chart."""
    text = (configured_path or "").strip()
    if not text:
        return default_chart_path()
    candidate = Path(text).expanduser()
    if candidate.is_absolute():
        return candidate
    cwd_candidate = Path.cwd() / candidate
    if cwd_candidate.exists():
        return cwd_candidate
    return app_root_dir() / candidate
