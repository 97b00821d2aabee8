"""
Thread Memory Store
===================
Persists conversation messages per thread so agents can replay recent
history. A pipeline run uses its run id as thread and resource id, so every
agent in that run reads and writes the same thread.

Storage Structure:
    {base_dir}/threads/
        ├── <name>-<hash>.json        # Thread messages
        ├── <name>-<hash>.json.lock   # File lock
        └── ...

Each thread file contains:
    - thread_id: Thread identifier
    - resource_id: Owning resource (user or run)
    - created_at / updated_at: ISO timestamps
    - messages: [{role, content, agent_id, timestamp}]

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from filelock import FileLock
from loguru import logger

from research_ai.config import MEMORY
from research_ai.utils.validation import sanitize_filename

VALID_ROLES = ("user", "assistant")


@dataclass
class MemoryMessage:
    """A single stored message."""
    role: str
    content: str
    agent_id: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        return {
            "role": self.role,
            "content": self.content,
            "agent_id": self.agent_id,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MemoryMessage":
        return cls(
            role=data["role"],
            content=data["content"],
            agent_id=data.get("agent_id"),
            timestamp=data.get("timestamp", ""),
        )


@dataclass
class MemoryThread:
    """A conversation thread and its messages."""
    thread_id: str
    resource_id: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    updated_at: str = field(default_factory=lambda: datetime.now().isoformat())
    messages: List[MemoryMessage] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "thread_id": self.thread_id,
            "resource_id": self.resource_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "messages": [m.to_dict() for m in self.messages],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MemoryThread":
        return cls(
            thread_id=data["thread_id"],
            resource_id=data.get("resource_id"),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
            messages=[MemoryMessage.from_dict(m) for m in data.get("messages", [])],
        )


class ThreadMemory:
    """
    File-backed conversation memory keyed by thread id.

    Usage:
        memory = ThreadMemory(".research_ai")
        memory.append("run-123", "user", "Proceed to Phase B ...", agent_id="phase-b-agent")
        history = memory.recent("run-123", limit=10)
    """

    THREADS_DIR = "threads"

    def __init__(self, base_dir: Union[str, Path, None] = None):
        """
        Initialize memory under a base directory.

        Args:
            base_dir: Root directory (defaults to RESEARCH_AI_HOME or .research_ai)
        """
        self.base_dir = Path(base_dir or MEMORY.HOME)
        self.threads_dir = self.base_dir / self.THREADS_DIR
        self.threads_dir.mkdir(parents=True, exist_ok=True)

        logger.debug(f"Thread memory initialized at {self.threads_dir}")

    def _get_thread_path(self, thread_id: str) -> Path:
        """Get path to the file for a thread: sanitized id plus a hash of the raw id."""
        digest = hashlib.sha256(thread_id.encode("utf-8")).hexdigest()[:16]
        return self.threads_dir / f"{sanitize_filename(thread_id, max_length=100)}-{digest}.json"

    def _read(self, path: Path) -> Optional[MemoryThread]:
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                return MemoryThread.from_dict(json.load(f))
        except (OSError, json.JSONDecodeError, KeyError) as e:
            logger.warning(f"Unreadable memory thread {path.name}: {e}")
            return None

    def get_thread(self, thread_id: str) -> Optional[MemoryThread]:
        """Load a thread, or None when it does not exist."""
        return self._read(self._get_thread_path(thread_id))

    def append(
        self,
        thread_id: str,
        role: str,
        content: str,
        resource_id: Optional[str] = None,
        agent_id: Optional[str] = None,
    ) -> MemoryMessage:
        """
        Append a message to a thread, creating the thread if needed.

        Args:
            thread_id: Thread identifier
            role: 'user' or 'assistant'
            content: Message text
            resource_id: Owning resource, recorded on first write
            agent_id: Agent that produced or received the message

        Returns:
            The stored message
        """
        if role not in VALID_ROLES:
            raise ValueError(f"Unsupported memory role: {role!r}")

        path = self._get_thread_path(thread_id)
        lock_path = path.with_suffix(".json.lock")
        message = MemoryMessage(role=role, content=content, agent_id=agent_id)

        with FileLock(lock_path, timeout=30):
            thread = self._read(path) or MemoryThread(thread_id=thread_id, resource_id=resource_id)
            if thread.resource_id is None and resource_id is not None:
                thread.resource_id = resource_id
            thread.messages.append(message)
            thread.updated_at = message.timestamp
            with open(path, "w", encoding="utf-8") as f:
                json.dump(thread.to_dict(), f, indent=2)

        return message

    def recent(self, thread_id: str, limit: int = MEMORY.LAST_MESSAGES) -> List[MemoryMessage]:
        """
        Return the last `limit` messages of a thread, oldest first.

        The window always starts on a user message so it can be replayed as
        alternating user/assistant turns.
        """
        thread = self.get_thread(thread_id)
        if thread is None or limit <= 0:
            return []

        window = thread.messages[-limit:]
        while window and window[0].role != "user":
            window = window[1:]
        return window

    def list_threads(self, resource_id: Optional[str] = None) -> List[str]:
        """List stored thread ids, optionally filtered by resource."""
        thread_ids = []
        for path in sorted(self.threads_dir.glob("*.json")):
            thread = self._read(path)
            if thread is None:
                continue
            if resource_id is not None and thread.resource_id != resource_id:
                continue
            thread_ids.append(thread.thread_id)
        return thread_ids

    def clear(self, thread_id: str) -> bool:
        """Delete a thread. Returns True when a file was removed."""
        path = self._get_thread_path(thread_id)
        if not path.exists():
            return False
        with FileLock(path.with_suffix(".json.lock"), timeout=30):
            path.unlink()
        logger.info(f"Cleared memory thread {thread_id}")
        return True
