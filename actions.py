"""Mouse, form and element action families.

Each family is a closed table of ``type -> coroutine``. Every handler acts on
the first element matching the request's selector; no disambiguation is done
here, so callers must pass selectors that are specific enough.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

from playwright.async_api import Locator, Page

from errors import UnsupportedActionError
from tool_inputs import ElementActionInput, FormActionInput, MouseActionInput

logger = logging.getLogger(__name__)

DEFAULT_SCROLL_AMOUNT = 500


def _first(page: Page, selector: str) -> Locator:
    return page.locator(selector).first


# ---------------------------------------------------------------------------
# Mouse
# ---------------------------------------------------------------------------

async def _click(page: Page, req: MouseActionInput) -> None:
    await _first(page, req.selector).click()


async def _double_click(page: Page, req: MouseActionInput) -> None:
    await _first(page, req.selector).dblclick()


async def _right_click(page: Page, req: MouseActionInput) -> None:
    await _first(page, req.selector).click(button="right")


async def _hover(page: Page, req: MouseActionInput) -> None:
    await _first(page, req.selector).hover()


async def _drag_drop(page: Page, req: MouseActionInput) -> None:
    await page.drag_and_drop(req.selector, req.target_selector)


async def _scroll(page: Page, req: MouseActionInput) -> None:
    amount = DEFAULT_SCROLL_AMOUNT if req.amount is None else req.amount
    await page.mouse.wheel(0, amount)


MOUSE_ACTIONS: dict[str, Callable[[Page, MouseActionInput], Awaitable[None]]] = {
    "click": _click,
    "double_click": _double_click,
    "right_click": _right_click,
    "hover": _hover,
    "drag_drop": _drag_drop,
    "scroll": _scroll,
}


# ---------------------------------------------------------------------------
# Form
# ---------------------------------------------------------------------------

async def _fill(el: Locator, req: FormActionInput) -> None:
    await el.fill(req.value)


async def _select(el: Locator, req: FormActionInput) -> None:
    await el.select_option(req.value)


async def _check(el: Locator, req: FormActionInput) -> None:
    await el.check()


async def _uncheck(el: Locator, req: FormActionInput) -> None:
    await el.uncheck()


async def _submit(el: Locator, req: FormActionInput) -> None:
    await el.evaluate("el => el.form?.submit()")


async def _upload(el: Locator, req: FormActionInput) -> None:
    await el.set_input_files(req.file_path)


async def _clear(el: Locator, req: FormActionInput) -> None:
    await el.fill("")


FORM_ACTIONS: dict[str, Callable[[Locator, FormActionInput], Awaitable[None]]] = {
    "fill": _fill,
    "select": _select,
    "check": _check,
    "uncheck": _uncheck,
    "radio": _check,
    "submit": _submit,
    "upload": _upload,
    "clear": _clear,
}


# ---------------------------------------------------------------------------
# Element (read / query)
# ---------------------------------------------------------------------------

async def _focus(el: Locator, req: ElementActionInput) -> str:
    await el.focus()
    return "focused"


async def _blur(el: Locator, req: ElementActionInput) -> str:
    await el.evaluate("el => el.blur()")
    return "blurred"


async def _read_text(el: Locator, req: ElementActionInput) -> str | None:
    return await el.text_content()


async def _read_value(el: Locator, req: ElementActionInput) -> str:
    return await el.input_value()


async def _read_attr(el: Locator, req: ElementActionInput) -> str | None:
    return await el.get_attribute(req.attribute)


async def _is_visible(el: Locator, req: ElementActionInput) -> bool:
    return await el.is_visible()


async def _is_enabled(el: Locator, req: ElementActionInput) -> bool:
    return await el.is_enabled()


async def _wait(el: Locator, req: ElementActionInput) -> str:
    await el.wait_for(state=req.state)
    return "waited"


ELEMENT_ACTIONS: dict[str, Callable[[Locator, ElementActionInput], Awaitable[Any]]] = {
    "focus": _focus,
    "blur": _blur,
    "read_text": _read_text,
    "read_value": _read_value,
    "read_attr": _read_attr,
    "is_visible": _is_visible,
    "is_enabled": _is_enabled,
    "wait": _wait,
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

async def mouse_action(page: Page, req: MouseActionInput) -> None:
    handler = MOUSE_ACTIONS.get(req.type)
    if handler is None:
        raise UnsupportedActionError(f"Unknown mouse action: {req.type}")
    logger.debug(f"mouse {req.type} on {req.selector!r}")
    await handler(page, req)


async def form_action(page: Page, req: FormActionInput) -> None:
    handler = FORM_ACTIONS.get(req.type)
    if handler is None:
        raise UnsupportedActionError(f"Unknown form action: {req.type}")
    logger.debug(f"form {req.type} on {req.selector!r}")
    await handler(_first(page, req.selector), req)


async def element_action(page: Page, req: ElementActionInput) -> Any:
    handler = ELEMENT_ACTIONS.get(req.type)
    if handler is None:
        raise UnsupportedActionError(f"Unknown element action: {req.type}")
    logger.debug(f"element {req.type} on {req.selector!r}")
    return await handler(_first(page, req.selector), req)
