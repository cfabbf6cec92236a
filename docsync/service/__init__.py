"""Dev server for live reference regeneration."""

from __future__ import annotations

from .app import RELOAD_EVENT, ReloadBroadcaster, create_app, run_service

__all__ = ["RELOAD_EVENT", "ReloadBroadcaster", "create_app", "run_service"]
