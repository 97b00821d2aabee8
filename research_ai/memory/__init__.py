"""Conversation memory keyed by thread and resource ids."""

from .store import MemoryMessage, MemoryThread, ThreadMemory

__all__ = ["MemoryMessage", "MemoryThread", "ThreadMemory"]
