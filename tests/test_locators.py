"""Tests for the smart_click fallback chain."""

from __future__ import annotations

import asyncio

import pytest

from errors import ElementNotFoundError
from fakes import FakePage
from locators import STRATEGIES, smart_click


def test_strategy_order_is_fixed():
    assert [s.name for s in STRATEGIES] == ["locator", "role", "text"]


def test_css_selector_wins_first():
    page = FakePage()
    page.visible_css.add("#submit")
    page.texts.add("#submit")

    message = asyncio.run(smart_click(page, "#submit"))

    assert message == "Clicked element using 'locator' strategy matching '#submit'"
    assert ("click", "#submit", "left") in page.calls
    assert not any(call[0] == "wait_for" and call[1].startswith("role=") for call in page.calls)


def test_button_name_uses_role_strategy():
    page = FakePage()
    page.buttons.add("Sign in")

    message = asyncio.run(smart_click(page, "Sign in"))

    assert message == "Clicked element using 'role' strategy matching 'Sign in'"


def test_visible_text_only_falls_through_to_text_strategy():
    page = FakePage()
    page.texts.add("Accept all cookies")

    message = asyncio.run(smart_click(page, "Accept all cookies"))

    assert message == "Clicked element using 'text' strategy matching 'Accept all cookies'"
    waits = [call[1] for call in page.calls if call[0] == "wait_for"]
    assert waits == [
        "Accept all cookies",
        "role=button[name=Accept all cookies]",
        "text=Accept all cookies",
    ]


def test_no_match_raises_element_not_found_naming_selector():
    page = FakePage()

    with pytest.raises(ElementNotFoundError, match="Nowhere to be found") as exc_info:
        asyncio.run(smart_click(page, "Nowhere to be found", timeout_ms=10))

    assert exc_info.value.selector == "Nowhere to be found"
    assert not any(call[0] == "click" for call in page.calls)
