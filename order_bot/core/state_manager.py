# Role: In-memory session store. Owns lifecycle of State objects:
# create/get by session_id, append messages, enforce bounded history, per-session locking and cleanup of idle sessions.

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Dict

from order_bot.models.message import Message
from order_bot.models.state import State


class StateManager:
    def __init__(self, max_history_messages: int = 20, session_ttl_minutes: int = 60) -> None:
        self._states: Dict[str, State] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._max_history_messages = max_history_messages
        self._ttl = timedelta(minutes=session_ttl_minutes)

    def get_or_create(self, session_id: str) -> State:
        # Reuse existing state or initialize a fresh one.
        with self._registry_lock:
            state = self._states.get(session_id)
            if state is None:
                state = State(session_id=session_id)
                self._states[session_id] = state
            return state

    def session_lock(self, session_id: str) -> threading.Lock:
        # Key line: one lock per conversation, so turns of the same session never interleave.
        with self._registry_lock:
            lock = self._locks.get(session_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[session_id] = lock
            return lock

    def add_message(self, session_id: str, role: str, content: str) -> State:
        # 1) Append message
        # 2) Update last-seen timestamp
        # 3) Trim to last N messages (bounded memory)
        state = self.get_or_create(session_id)
        state.conversation_history.append(Message(role=role, content=content))
        state.updated_at = datetime.now(timezone.utc)

        if len(state.conversation_history) > self._max_history_messages:
            state.conversation_history = state.conversation_history[-self._max_history_messages :]

        return state

    def increment_turn(self, state: State) -> None:
        state.turn_count += 1
        state.updated_at = datetime.now(timezone.utc)

    def reset(self, session_id: str) -> None:
        with self._registry_lock:
            self._states.pop(session_id, None)
            self._locks.pop(session_id, None)

    def cleanup_expired(self) -> int:
        # Role: drop inactive sessions to avoid unbounded growth (best for long-running servers).
        now = datetime.now(timezone.utc)
        with self._registry_lock:
            to_delete = [sid for sid, st in self._states.items() if (now - st.updated_at) > self._ttl]
            for sid in to_delete:
                del self._states[sid]
                self._locks.pop(sid, None)
        return len(to_delete)
