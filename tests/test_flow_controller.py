"""
Session-level scenarios driven through FlowController with scripted providers.
"""

from __future__ import annotations

import asyncio
import logging

import pytest

from atelier.application.exceptions import (
    GenerationInProgressError,
    InputUnavailableError,
    InvalidTransitionError,
    UnknownOptionError,
)
from atelier.application.utils.fallbacks import (
    DEFAULT_INFO,
    UNKNOWN_ANALYSIS,
    VOICE_ERROR_MODIFICATION,
)
from atelier.core.config import settings
from atelier.domain.entities.flow_step import FlowStep, GenerationStatus
from atelier.domain.entities.option import Dimension
from atelier.domain.entities.search import ImageRef
from atelier.infrastructure.ai.mock_provider import MockAIProvider

from fakes import PLACEHOLDER, ScriptedProvider, build_controller, let_tasks_run, select_until_mood


def test_full_selection_produces_batch_with_mock_provider():
    controller = build_controller(MockAIProvider(), batch_size=settings.GENERATION_BATCH_SIZE)

    async def scenario():
        await select_until_mood(controller)
        return await controller.select(Dimension.MOOD, "city")

    state = asyncio.run(scenario())

    assert state.step == FlowStep.GENERATION
    assert state.status == GenerationStatus.COMPLETE
    assert len(state.candidates) == min(max(1, settings.GENERATION_BATCH_SIZE), 8)
    for item in state.candidates:
        assert item.info.name
        for value in (
            item.specs.comfort,
            item.specs.versatility,
            item.specs.trend,
            item.specs.warmth,
            item.specs.price_tier,
        ):
            assert 0 <= value <= 100
        assert item.match_score is None


def test_unknown_option_is_rejected(provider):
    controller = build_controller(provider)

    async def scenario():
        await controller.select(Dimension.TARGET, "womens")
        await controller.select(Dimension.CATEGORY, "accessories")
        # tshirt belongs to tops, not to the selected category
        await controller.select(Dimension.SUB_CATEGORY, "tshirt")

    with pytest.raises(UnknownOptionError):
        asyncio.run(scenario())
    assert controller.state().selection.sub_category is None


def test_gated_selection_leaves_state_untouched(provider):
    controller = build_controller(provider)
    before = controller.state()

    with pytest.raises(InvalidTransitionError):
        asyncio.run(controller.select(Dimension.MOOD, "city"))

    assert controller.state() is before


def test_generation_is_serialized(provider):
    controller = build_controller(provider)

    async def scenario():
        provider.gate = asyncio.Event()
        await select_until_mood(controller)
        task = asyncio.create_task(controller.select(Dimension.MOOD, "city"))
        await let_tasks_run()
        assert controller.state().status == GenerationStatus.GENERATING

        with pytest.raises(GenerationInProgressError):
            await controller.select(Dimension.MOOD, "noir")
        with pytest.raises(GenerationInProgressError):
            await controller.regenerate()

        provider.gate.set()
        return await task

    state = asyncio.run(scenario())

    assert state.status == GenerationStatus.COMPLETE
    assert state.selection.mood.id == "city"
    assert len(state.candidates) == 4


def test_reset_discards_late_results(provider):
    controller = build_controller(provider)

    async def scenario():
        provider.gate = asyncio.Event()
        await select_until_mood(controller)
        task = asyncio.create_task(controller.select(Dimension.MOOD, "city"))
        await let_tasks_run()
        controller.reset()
        provider.gate.set()
        await task

    asyncio.run(scenario())

    state = controller.state()
    assert state.step == FlowStep.TARGET_SELECT
    assert state.status == GenerationStatus.IDLE
    assert state.candidates == ()
    assert state.selection.target is None


def test_upstream_change_during_generation_discards_batch(provider):
    controller = build_controller(provider)

    async def scenario():
        provider.gate = asyncio.Event()
        await select_until_mood(controller)
        task = asyncio.create_task(controller.select(Dimension.MOOD, "city"))
        await let_tasks_run()
        await controller.select(Dimension.CATEGORY, "bottoms")
        provider.gate.set()
        await task

    asyncio.run(scenario())

    state = controller.state()
    assert state.step == FlowStep.SUB_CATEGORY_SELECT
    assert state.status == GenerationStatus.IDLE
    assert state.candidates == ()
    assert state.selection.mood is None


def test_every_fallback_keeps_flow_moving():
    provider = ScriptedProvider(
        fail=(
            "generate_image",
            "generate_details",
            "interpret_voice",
            "analyze_photo",
        )
    )
    controller = build_controller(provider, batch_size=2)

    async def scenario():
        await controller.add_closet_photo(ImageRef(data=b"\xff\xd8jpeg"))
        await select_until_mood(controller)
        state = await controller.select(Dimension.MOOD, "city")
        assert state.status == GenerationStatus.COMPLETE
        controller.choose(state.candidates[0].id)
        return await controller.refine(b"RIFFwave", "audio/wav")

    state = asyncio.run(scenario())

    assert state.closet[0].analysis == UNKNOWN_ANALYSIS
    assert all(item.info.name == DEFAULT_INFO.name for item in state.candidates)
    assert state.status == GenerationStatus.COMPLETE
    assert state.last_modification == VOICE_ERROR_MODIFICATION
    assert state.selected_item.image_url == PLACEHOLDER
    assert state.selected_item.info.styling_tips.startswith(f'Refined: "{VOICE_ERROR_MODIFICATION}".')


def test_refinement_patches_selected_item(provider):
    controller = build_controller(provider)

    async def scenario():
        await select_until_mood(controller)
        state = await controller.select(Dimension.MOOD, "city")
        chosen = controller.choose(state.candidates[1].id).selected_item
        return chosen, await controller.refine(b"RIFFwave")

    chosen, state = asyncio.run(scenario())

    refined = state.selected_item
    assert state.step == FlowStep.DETAIL
    assert state.status == GenerationStatus.COMPLETE
    assert refined.id == chosen.id
    assert refined.specs == chosen.specs
    assert refined.image_url != chosen.image_url
    assert "make it darker" in refined.info.styling_tips
    assert refined.modifications == ("make it darker",)
    assert state.candidates[1] == refined
    assert provider.voice_contexts == ["A Women T-Shirt, style: Minimal"]


def test_refine_without_audio_is_rejected(provider):
    controller = build_controller(provider)

    with pytest.raises(InputUnavailableError):
        asyncio.run(controller.refine(b""))
    assert "interpret_voice" not in provider.calls


def test_refine_without_selected_item_is_noop(provider):
    controller = build_controller(provider)
    before = controller.state()

    state = asyncio.run(controller.refine(b"RIFFwave"))

    assert state is before
    assert provider.calls == []


def test_closet_items_accumulate_and_survive_reset(provider):
    controller = build_controller(provider)

    async def scenario():
        await controller.add_closet_photo(ImageRef(data=b"first", mime_type="image/png"))
        await controller.add_closet_photo(ImageRef(data=b"second"))

    asyncio.run(scenario())
    state = controller.reset()

    assert len(state.closet) == 2
    assert state.closet[0].image_url.startswith("data:image/png;base64,")
    assert state.closet[0].analysis.color == "Black"

    with pytest.raises(InputUnavailableError):
        asyncio.run(controller.add_closet_photo(ImageRef(data=b"")))


def test_place_order_logs_request(provider, caplog):
    caplog.set_level(logging.INFO)
    controller = build_controller(provider, batch_size=1)

    with pytest.raises(InvalidTransitionError):
        controller.place_order()

    async def scenario():
        await select_until_mood(controller, category="accessories", sub_category=None)
        return await controller.select(Dimension.MOOD, "earth")

    state = asyncio.run(scenario())
    controller.choose(state.candidates[0].id)
    state = controller.place_order()

    assert state.order_placed is True
    assert "ORDER_REQUESTED" in caplog.text


async def _open_first_candidate(controller):
    await select_until_mood(controller)
    state = await controller.select(Dimension.MOOD, "city")
    return controller.choose(state.candidates[0].id)


def test_cancelled_generation_releases_the_session(provider):
    controller = build_controller(provider)

    async def scenario():
        provider.gate = asyncio.Event()
        await select_until_mood(controller)
        task = asyncio.create_task(controller.select(Dimension.MOOD, "city"))
        await let_tasks_run()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert controller.state().status == GenerationStatus.ERROR

        provider.gate.set()
        return await controller.regenerate()

    state = asyncio.run(scenario())

    assert state.status == GenerationStatus.COMPLETE
    assert len(state.candidates) == 4


def test_cancelled_refinement_releases_the_session(provider):
    controller = build_controller(provider)

    async def scenario():
        chosen = (await _open_first_candidate(controller)).selected_item
        provider.gate = asyncio.Event()
        task = asyncio.create_task(controller.refine(b"RIFFwave"))
        await let_tasks_run()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        state = controller.state()
        assert state.status == GenerationStatus.ERROR
        assert state.selected_item == chosen

        provider.gate.set()
        return await controller.refine(b"RIFFwave")

    state = asyncio.run(scenario())

    assert state.status == GenerationStatus.COMPLETE
    assert state.selected_item.modifications == ("make it darker",)


def test_refinement_is_serialized(provider):
    controller = build_controller(provider)

    async def scenario():
        await _open_first_candidate(controller)
        provider.gate = asyncio.Event()
        task = asyncio.create_task(controller.refine(b"RIFFwave"))
        await let_tasks_run()
        assert controller.state().status == GenerationStatus.GENERATING

        with pytest.raises(GenerationInProgressError):
            await controller.refine(b"RIFFwave")

        provider.gate.set()
        return await task

    state = asyncio.run(scenario())

    assert state.status == GenerationStatus.COMPLETE
    assert state.last_modification == "make it darker"
    assert state.selected_item.modifications == ("make it darker",)
    assert provider.calls.count("interpret_voice") == 1


def test_reset_discards_late_refinement(provider):
    controller = build_controller(provider)

    async def scenario():
        await _open_first_candidate(controller)
        provider.gate = asyncio.Event()
        task = asyncio.create_task(controller.refine(b"RIFFwave"))
        await let_tasks_run()
        controller.reset()
        provider.gate.set()
        await task

    asyncio.run(scenario())

    state = controller.state()
    assert state.step == FlowStep.TARGET_SELECT
    assert state.status == GenerationStatus.IDLE
    assert state.selected_item is None
    assert state.candidates == ()
    assert state.last_modification is None


def test_upstream_change_during_refinement_discards_result(provider):
    controller = build_controller(provider)

    async def scenario():
        await _open_first_candidate(controller)
        provider.gate = asyncio.Event()
        task = asyncio.create_task(controller.refine(b"RIFFwave"))
        await let_tasks_run()
        await controller.select(Dimension.CATEGORY, "bottoms")
        provider.gate.set()
        await task

    asyncio.run(scenario())

    state = controller.state()
    assert state.step == FlowStep.SUB_CATEGORY_SELECT
    assert state.status == GenerationStatus.IDLE
    assert state.selected_item is None
    assert state.candidates == ()
    assert state.selection.style_preset is None
