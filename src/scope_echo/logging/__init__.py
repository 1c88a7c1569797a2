"""Structured logging utilities."""

from .events import EngineEvent, EventHandler, JsonlEventLogger, emit, make_event, utc_timestamp

__all__ = ["EngineEvent", "EventHandler", "JsonlEventLogger", "emit", "make_event", "utc_timestamp"]
