from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace

from atelier.application.exceptions import InputUnavailableError, UnknownOptionError
from atelier.application.ports.option_catalog import OptionCatalogPort
from atelier.application.ports.session_store import SessionStorePort
from atelier.application.use_cases.closet_registry import ClosetRegistry
from atelier.application.use_cases.flow_reducer import FlowReducer
from atelier.application.use_cases.generate_batch import GenerationOrchestrator
from atelier.application.use_cases.refine_item import RefinementPipeline
from atelier.application.utils.flow_rules import visible_steps
from atelier.domain.entities.flow_state import FlowState
from atelier.domain.entities.flow_step import FlowStep
from atelier.domain.entities.intents import (
    BackToGeneration,
    ChooseItem,
    ClosetItemAdded,
    GenerationCompleted,
    GenerationFailed,
    GenerationStarted,
    Intent,
    Navigate,
    OrderPlaced,
    RefinementCompleted,
    RefinementStarted,
    Reset,
    Select,
)
from atelier.domain.entities.option import Dimension
from atelier.domain.entities.search import ImageRef


class FlowController:
    """
    Drives one session's flow.

    Every mutation goes through `dispatch`: read the session's FlowState,
    reduce the intent, store the result. Asynchronous work (generation,
    refinement) dispatches a start intent, awaits the AI calls, then
    dispatches a completion carrying the epoch captured at start, so results
    that outlived a reset or an upstream change are discarded by the reducer.
    """

    def __init__(
        self,
        session_id: str,
        store: SessionStorePort,
        catalog: OptionCatalogPort,
        reducer: FlowReducer,
        orchestrator: GenerationOrchestrator,
        refinement: RefinementPipeline,
        closet: ClosetRegistry,
    ) -> None:
        self._session_id = session_id
        self._store = store
        self._catalog = catalog
        self._reducer = reducer
        self._orchestrator = orchestrator
        self._refinement = refinement
        self._closet = closet
        self._logger = logging.getLogger(__name__)

    @property
    def session_id(self) -> str:
        return self._session_id

    def state(self) -> FlowState:
        return self._store.get_state(self._session_id)

    def visible_steps(self) -> list[FlowStep]:
        return visible_steps(self.state(), self._catalog)

    def dispatch(self, intent: Intent) -> FlowState:
        current = self.state()
        try:
            updated = self._reducer.reduce(current, intent)
        except Exception as e:
            self._logger.info(
                "Intent rejected",
                extra={
                    "session_id": self._session_id,
                    "step": current.step.value,
                    "status": current.status.value,
                    "reason": f"{type(intent).__name__}: {e}",
                },
            )
            raise
        if updated is current:
            return current
        updated = replace(updated, updated_at=time.time())
        self._store.set_state(self._session_id, updated)
        self._logger.debug(
            "Intent applied",
            extra={
                "session_id": self._session_id,
                "step": updated.step.value,
                "status": updated.status.value,
                "epoch": updated.epoch,
                "reason": type(intent).__name__,
            },
        )
        return updated

    async def select(self, dimension: Dimension, option_id: str) -> FlowState:
        """Select an option; selecting the mood starts generation and awaits the batch."""
        state = self.state()
        category_id = state.selection.category.id if state.selection.category else None
        option = self._catalog.get_option(dimension, option_id, category_id=category_id)
        if option is None:
            raise UnknownOptionError(f"{dimension.value}:{option_id}")

        state = self.dispatch(Select(dimension=dimension, option=option))
        if dimension == Dimension.MOOD:
            return await self.generate()
        return state

    def navigate(self, step: FlowStep) -> FlowState:
        return self.dispatch(Navigate(step=step))

    def reset(self) -> FlowState:
        state = self.dispatch(Reset())
        self._logger.info("Flow reset", extra={"session_id": self._session_id, "epoch": state.epoch})
        return state

    async def generate(self) -> FlowState:
        state = self.dispatch(GenerationStarted())
        epoch = state.epoch
        self._logger.info(
            "Generation started",
            extra={"session_id": self._session_id, "epoch": epoch, "status": state.status.value},
        )
        try:
            items = await self._orchestrator.generate_batch(state.selection, state.closet)
        except asyncio.CancelledError:
            self._logger.warning(
                "Generation cancelled", extra={"session_id": self._session_id, "epoch": epoch, "reason": "cancelled"}
            )
            self.dispatch(GenerationFailed(epoch=epoch, reason="cancelled"))
            raise
        except Exception as e:
            self._logger.exception(
                "Generation batch failed", extra={"session_id": self._session_id, "epoch": epoch, "reason": str(e)}
            )
            return self.dispatch(GenerationFailed(epoch=epoch, reason=str(e)))

        state = self.dispatch(GenerationCompleted(epoch=epoch, items=tuple(items)))
        self._logger.info(
            "Generation finished",
            extra={"session_id": self._session_id, "epoch": epoch, "status": state.status.value},
        )
        return state

    async def regenerate(self) -> FlowState:
        """Re-run the batch for the current selection, e.g. after an error."""
        return await self.generate()

    def choose(self, item_id: str) -> FlowState:
        return self.dispatch(ChooseItem(item_id=item_id))

    def back_to_generation(self) -> FlowState:
        return self.dispatch(BackToGeneration())

    async def refine(self, audio: bytes, mime_type: str = "audio/wav") -> FlowState:
        if not audio:
            raise InputUnavailableError("No audio was recorded.")
        state = self.state()
        if state.selected_item is None:
            self._logger.info("Refinement ignored, no item selected", extra={"session_id": self._session_id})
            return state

        state = self.dispatch(RefinementStarted())
        epoch = state.epoch
        item_id = state.selected_item.id
        try:
            outcome = await self._refinement.run(state.selection, audio, mime_type)
        except asyncio.CancelledError:
            self._logger.warning(
                "Refinement cancelled", extra={"session_id": self._session_id, "item_id": item_id, "reason": "cancelled"}
            )
            self.dispatch(GenerationFailed(epoch=epoch, reason="cancelled"))
            raise
        except Exception as e:
            self._logger.exception(
                "Refinement failed", extra={"session_id": self._session_id, "item_id": item_id, "reason": str(e)}
            )
            return self.dispatch(GenerationFailed(epoch=epoch, reason=str(e)))

        return self.dispatch(
            RefinementCompleted(
                epoch=epoch,
                item_id=item_id,
                image_url=outcome.image_url,
                modification=outcome.modification,
            )
        )

    async def add_closet_photo(self, image: ImageRef) -> FlowState:
        item = await self._closet.build_item(image)
        return self.dispatch(ClosetItemAdded(item=item))

    def place_order(self) -> FlowState:
        state = self.dispatch(OrderPlaced())
        item = state.selected_item
        self._logger.info(
            "ORDER_REQUESTED",
            extra={"session_id": self._session_id, "item_id": item.id if item else None},
        )
        self._logger.info("Order processing is not wired -> no transaction created")
        return state
