#!/usr/bin/env python3
"""Smoke script for the flow API endpoints against a running server."""

import base64
import os
import sys
from typing import Any

import httpx


BASE_URL = os.getenv("ATELIER_BASE_URL", "http://127.0.0.1:8001")

SELECTIONS = (
    ("target", "womens"),
    ("category", "tops"),
    ("subCategory", "tshirt"),
    ("stylePreset", "minimal"),
    ("mood", "city"),
)


def _post(path: str, payload: dict[str, Any] | None = None, timeout: float = 30.0) -> dict[str, Any]:
    response = httpx.post(f"{BASE_URL}/api/v1{path}", json=payload, timeout=timeout)
    response.raise_for_status()
    return response.json()


def check_flow() -> tuple[str, str] | None:
    """Walk the selection steps, generate, choose and refine."""
    print("=" * 60)
    print("Flow: Women / Tops / T-Shirt / Minimal / City Life")
    print("=" * 60)

    try:
        session_id = _post("/sessions")["session_id"]
        print(f"Session: {session_id}")

        state: dict[str, Any] = {}
        for dimension, option_id in SELECTIONS:
            # the mood selection waits for the whole batch
            state = _post(
                f"/sessions/{session_id}/select",
                {"dimension": dimension, "option_id": option_id},
                timeout=180.0,
            )
            print(f"  {dimension}={option_id} -> step {state['step']} ({state['status']})")

        print(f"\nGenerated {len(state['candidates'])} candidates:")
        for n, item in enumerate(state["candidates"], start=1):
            specs = item["specs"]
            print(f"  {n}. {item['info']['name']} comfort={specs['comfort']} trend={specs['trend']}")

        item_id = state["candidates"][0]["id"]
        _post(f"/sessions/{session_id}/choose", {"item_id": item_id})

        audio = base64.b64encode(b"RIFF$\x00\x00\x00WAVEfmt ").decode("ascii")
        refined = _post(f"/sessions/{session_id}/refine", {"audio_base64": audio}, timeout=180.0)
        print(f"\nRefined: {refined['last_modification']}")
        print(f"Styling tips: {refined['selected_item']['info']['styling_tips']}")
        return session_id, item_id
    except httpx.HTTPStatusError as e:
        print(f"HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return None
    except Exception as e:
        print(f"Error: {e}")
        return None


def check_search(session_id: str, item_id: str) -> bool:
    print("\n" + "=" * 60)
    print("Visual search and bespoke quote")
    print("=" * 60)

    try:
        payload = {"session_id": session_id, "item_id": item_id}
        result = _post("/visual-search", payload, timeout=120.0)
        print(result["description"])
        for link in result["links"]:
            print(f"  - {link['title']}: {link['uri']}")
        if result.get("fallback_search_url"):
            print(f"  manual search: {result['fallback_search_url']}")

        quote = _post("/bespoke-quote", payload, timeout=120.0)
        print(f"\nQuote: {quote['fabric_name']} total ${quote['total_cost']:.0f} ({quote['complexity']})")
        return True
    except httpx.HTTPStatusError as e:
        print(f"HTTP Error: {e.response.status_code}")
        print(f"Response: {e.response.text}")
        return False
    except Exception as e:
        print(f"Error: {e}")
        return False


def main():
    print("\nSmoke testing Atelier Flow API\n")

    try:
        httpx.get(f"{BASE_URL}/health", timeout=5.0)
        print("Server is running\n")
    except Exception:
        print("Server is not running!")
        print("   Please start it with: uvicorn atelier.main:app --reload --port 8001")
        sys.exit(1)

    result = check_flow()
    if result:
        check_search(*result)

    print("\n" + "=" * 60)
    print("Smoke run complete")
    print("=" * 60 + "\n")


if __name__ == "__main__":
    main()
