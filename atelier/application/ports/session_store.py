from abc import ABC, abstractmethod

from atelier.domain.entities.flow_state import FlowState


class SessionStorePort(ABC):
    @abstractmethod
    def get_or_create(self, session_id: str | None) -> str:
        raise NotImplementedError

    @abstractmethod
    def exists(self, session_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_state(self, session_id: str) -> FlowState:
        """Get the session's flow state. Raises SessionNotFoundError for unknown ids."""
        raise NotImplementedError

    @abstractmethod
    def set_state(self, session_id: str, state: FlowState) -> None:
        raise NotImplementedError
