"""Refresh trace: JSONL log of each fetch, aggregate and render cycle."""

from mileview.trace.schema import Event, EventType
from mileview.trace.store_jsonl import JsonlTraceStore, load_events

__all__ = ["Event", "EventType", "JsonlTraceStore", "load_events"]
