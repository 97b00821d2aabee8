"""Tests for the file-backed thread memory.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from research_ai.memory import ThreadMemory


@pytest.mark.unit
def test_append_creates_thread_file(memory: ThreadMemory) -> None:
    memory.append("run-1", "user", "hello", resource_id="run-1", agent_id="intake-agent")

    path = memory._get_thread_path("run-1")
    assert path.name.startswith("run-1-")
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["thread_id"] == "run-1"
    assert payload["resource_id"] == "run-1"
    assert payload["messages"][0]["content"] == "hello"
    assert payload["messages"][0]["agent_id"] == "intake-agent"


@pytest.mark.unit
def test_append_rejects_unknown_role(memory: ThreadMemory) -> None:
    with pytest.raises(ValueError, match="role"):
        memory.append("run-1", "system", "nope")


@pytest.mark.unit
def test_recent_returns_window_starting_with_user(memory: ThreadMemory) -> None:
    for i in range(3):
        memory.append("t", "user", f"q{i}")
        memory.append("t", "assistant", f"a{i}")

    window = memory.recent("t", limit=3)

    assert [m.content for m in window] == ["q2", "a2"]
    assert [m.content for m in memory.recent("t", limit=4)] == ["q1", "a1", "q2", "a2"]


@pytest.mark.unit
def test_recent_unknown_thread_and_zero_limit(memory: ThreadMemory) -> None:
    assert memory.recent("missing") == []
    memory.append("t", "user", "x")
    assert memory.recent("t", limit=0) == []


@pytest.mark.unit
def test_threads_are_isolated(memory: ThreadMemory) -> None:
    memory.append("run-a", "user", "a", resource_id="run-a")
    memory.append("run-b", "user", "b", resource_id="run-b")

    assert [m.content for m in memory.get_thread("run-a").messages] == ["a"]
    assert sorted(memory.list_threads()) == ["run-a", "run-b"]
    assert memory.list_threads(resource_id="run-b") == ["run-b"]


@pytest.mark.unit
def test_thread_ids_are_sanitized(memory: ThreadMemory) -> None:
    memory.append("../escape", "user", "x")

    files = list(memory.threads_dir.glob("*.json"))
    assert len(files) == 1
    assert files[0].parent == memory.threads_dir


@pytest.mark.unit
def test_ids_that_sanitize_alike_keep_separate_threads(memory: ThreadMemory) -> None:
    memory.append("team/alpha", "user", "secret for team")
    memory.append("alpha", "user", "other conversation")
    memory.append("a:b", "user", "colon")
    memory.append("ab", "user", "plain")
    memory.append("...", "user", "dots")
    memory.append("..", "user", "more dots")

    assert [m.content for m in memory.recent("alpha")] == ["other conversation"]
    assert [m.content for m in memory.recent("team/alpha")] == ["secret for team"]
    assert [m.content for m in memory.recent("a:b")] == ["colon"]
    assert [m.content for m in memory.recent("ab")] == ["plain"]
    assert [m.content for m in memory.recent("...")] == ["dots"]
    assert len(list(memory.threads_dir.glob("*.json"))) == 6
    assert sorted(memory.list_threads()) == sorted(["team/alpha", "alpha", "a:b", "ab", "...", ".."])


@pytest.mark.unit
def test_clear(memory: ThreadMemory) -> None:
    memory.append("t", "user", "x")
    assert memory.clear("t") is True
    assert memory.get_thread("t") is None
    assert memory.clear("t") is False


@pytest.mark.unit
def test_unreadable_thread_is_treated_as_missing(tmp_path: Path) -> None:
    memory = ThreadMemory(tmp_path)
    memory._get_thread_path("broken").write_text("{not json", encoding="utf-8")

    assert memory.get_thread("broken") is None
    assert memory.list_threads() == []
