#!/usr/bin/env python3
"""
Interactive local flow harness (no HTTP).

Usage:
  python3 scripts/flow_local.py

What it does:
- Creates one session in the in-memory store
- Sends your commands through the same FlowController the API uses
- Prints the current step, status, visible steps and candidates after every command
"""

from __future__ import annotations

import asyncio
import mimetypes
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from atelier.application.use_cases.flow_controller import FlowController  # noqa: E402
from atelier.domain.entities.flow_state import FlowState  # noqa: E402
from atelier.domain.entities.flow_step import FlowStep  # noqa: E402
from atelier.domain.entities.option import Dimension  # noqa: E402
from atelier.domain.entities.search import ImageRef  # noqa: E402
from atelier.wiring.dependencies import (  # noqa: E402
    build_flow_controller,
    get_option_catalog,
    get_session_store,
    get_visual_search_use_case,
)

HELP = """Commands:
  /options <dimension>          -> list options (target, category, subCategory, stylePreset, mood)
  /select <dimension> <id>      -> select an option (mood starts generation)
  /nav <STEP>                   -> go back to an earlier selection step
  /generate                     -> regenerate the batch
  /choose <n>                   -> open candidate n (1-based)
  /back                         -> detail back to generation
  /refine <audio file>          -> voice refinement of the selected item
  /closet <image file>          -> add a wardrobe photo
  /search                       -> visual search on the selected item
  /quote                        -> bespoke quote for the selected item
  /order                        -> place the (no-op) order
  /reset                        -> start over
  /new                          -> new session
  /quit                         -> exit"""


def _print_state(state: FlowState, controller: FlowController) -> None:
    print("\n--- State ---")
    print(f"step: {state.step.value}  status: {state.status.value}  epoch: {state.epoch}")
    print("visible: " + " > ".join(step.value for step in controller.visible_steps()))
    for key, option in state.selection.as_dict().items():
        if option is not None:
            print(f"  {key}: {option.label}")
    for n, item in enumerate(state.candidates, start=1):
        marker = "*" if state.selected_item and state.selected_item.id == item.id else " "
        score = f" match={item.match_score}" if item.match_score is not None else ""
        print(f" {marker}{n}. {item.info.name}{score}  {item.image_url[:60]}")
    if state.selected_item:
        print(f"styling tips: {state.selected_item.info.styling_tips}")
    if state.closet:
        print(f"closet: {len(state.closet)} item(s)")
    print("-" * 60)


def _new_controller() -> FlowController:
    session_id = get_session_store().get_or_create(None)
    print(f"session_id: {session_id}")
    return build_flow_controller(session_id)


async def _run(controller: FlowController, cmd: str, args: list[str]) -> FlowController:
    if cmd == "/options":
        category = controller.state().selection.category
        for option in get_option_catalog().list_options(Dimension(args[0]), category.id if category else None):
            print(f"  {option.id:<12} {option.label:<14} {option.description or ''}")
        return controller
    if cmd == "/select":
        state = await controller.select(Dimension(args[0]), args[1])
    elif cmd == "/nav":
        state = controller.navigate(FlowStep(args[0].upper()))
    elif cmd == "/generate":
        state = await controller.regenerate()
    elif cmd == "/choose":
        state = controller.choose(controller.state().candidates[int(args[0]) - 1].id)
    elif cmd == "/back":
        state = controller.back_to_generation()
    elif cmd == "/refine":
        path = Path(args[0])
        mime_type = mimetypes.guess_type(path.name)[0] or "audio/wav"
        state = await controller.refine(path.read_bytes(), mime_type)
    elif cmd == "/closet":
        path = Path(args[0])
        mime_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
        state = await controller.add_closet_photo(ImageRef(data=path.read_bytes(), mime_type=mime_type))
    elif cmd in ("/search", "/quote"):
        item = controller.state().selected_item
        if item is None:
            print("Choose an item first.")
            return controller
        image = ImageRef(url=item.image_url)
        if cmd == "/search":
            result = await get_visual_search_use_case().search(image)
            print(result.description)
            for link in result.links:
                print(f"  - {link.title}: {link.uri}")
            if result.fallback_search_url:
                print(f"  manual search: {result.fallback_search_url}")
        else:
            quote = await get_visual_search_use_case().quote(image)
            print(f"{quote.fabric_name}: ${quote.total_cost:.0f}, {quote.timeline}, {quote.complexity}")
            print(f"  {quote.comments}")
        return controller
    elif cmd == "/order":
        state = controller.place_order()
    elif cmd == "/reset":
        state = controller.reset()
    elif cmd == "/new":
        controller = _new_controller()
        state = controller.state()
    else:
        print(HELP)
        return controller

    _print_state(state, controller)
    return controller


def main() -> None:
    print("\nLocal Flow Harness")
    print("-" * 60)
    controller = _new_controller()
    # one loop for the whole session; the AI client is reused across commands
    loop = asyncio.new_event_loop()
    print("Type /help for commands.")
    print("-" * 60)

    while True:
        try:
            line = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            loop.close()
            return

        if not line:
            continue
        cmd, *args = line.split()
        cmd = cmd.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            loop.close()
            return

        try:
            controller = loop.run_until_complete(_run(controller, cmd, args))
        except (IndexError, ValueError) as e:
            print(f"ERROR: {e} (type /help for usage)")
        except Exception as e:
            print(f"ERROR: {type(e).__name__}: {e}")


if __name__ == "__main__":
    main()
