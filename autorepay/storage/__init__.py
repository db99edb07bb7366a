"""Durable state stores."""
from .json_store import JsonStateStore
from .memory_store import MemoryStateStore

__all__ = ["JsonStateStore", "MemoryStateStore"]
