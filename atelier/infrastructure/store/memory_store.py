from __future__ import annotations

import uuid

from atelier.application.exceptions import SessionNotFoundError
from atelier.application.ports.session_store import SessionStorePort
from atelier.domain.entities.flow_state import FlowState


class MemorySessionStore(SessionStorePort):
    def __init__(self, session_limit: int = 1000) -> None:
        self._states: dict[str, FlowState] = {}
        self._session_limit = session_limit

    def get_or_create(self, session_id: str | None) -> str:
        if session_id and session_id in self._states:
            return session_id
        sid = session_id or uuid.uuid4().hex
        self._states[sid] = FlowState()
        if len(self._states) > self._session_limit:
            # dicts keep insertion order; drop the oldest sessions
            for stale in list(self._states)[: len(self._states) - self._session_limit]:
                del self._states[stale]
        return sid

    def exists(self, session_id: str) -> bool:
        return session_id in self._states

    def get_state(self, session_id: str) -> FlowState:
        try:
            return self._states[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def set_state(self, session_id: str, state: FlowState) -> None:
        if session_id not in self._states:
            raise SessionNotFoundError(session_id)
        self._states[session_id] = state
