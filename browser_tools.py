"""Browser tool provider: the tool catalogue exposed over MCP.

Each tool is registered as a (schema, handler, input_model) triple in
__init__. Handlers receive a validated request model, call exactly one
BrowserSession operation and return text (JSON for structured results).
To add a new browser tool: define the schema dict and input model, write the
async handler, call self.register_tool(schema, handler, model).
"""

from __future__ import annotations

import json
import logging
from typing import Any

from browser_session import BrowserSession
from tool_inputs import (
    ElementActionInput,
    EvaluateInput,
    FormActionInput,
    LaunchBrowserInput,
    MouseActionInput,
    NavigateActionInput,
    NoParamsInput,
    ScreenshotInput,
    SmartClickInput,
    WaitForLoadStateInput,
)
from tool_registry import ToolProvider

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_LIMIT = 8000


# ---------------------------------------------------------------------------
# Tool schemas — input schemas are generated from the request models
# ---------------------------------------------------------------------------

_LAUNCH_BROWSER_SCHEMA = {
    "name": "launch_browser",
    "description": "Launch a browser (chromium, firefox or webkit). No-op if one is already running.",
}

_NAVIGATE_ACTION_SCHEMA = {
    "name": "navigate_action",
    "description": (
        "Navigation and tabs: open a URL, reload, back, forward, "
        "new_tab (optional url), switch_tab (tabIndex), close_tab."
    ),
}

_MOUSE_ACTION_SCHEMA = {
    "name": "mouse_action",
    "description": (
        "Mouse action on the first element matching selector: click, double_click, "
        "right_click, hover, drag_drop (to targetSelector), scroll (amount px, default 500)."
    ),
}

_FORM_ACTION_SCHEMA = {
    "name": "form_action",
    "description": (
        "Form action on the first element matching selector: fill, select, check, "
        "uncheck, radio, submit (submits the enclosing form), upload (filePath), clear."
    ),
}

_ELEMENT_ACTION_SCHEMA = {
    "name": "element_action",
    "description": (
        "Query the first element matching selector: focus, blur, read_text, read_value, "
        "read_attr (attribute), is_visible, is_enabled, wait (state). Returns JSON."
    ),
}

_SMART_CLICK_SCHEMA = {
    "name": "smart_click",
    "description": (
        "Click an element by CSS selector, button name or visible text, "
        "trying each in that order."
    ),
}

_GET_PAGE_STATE_SCHEMA = {
    "name": "get_page_state",
    "description": "URL, title, visible button labels, input names/placeholders and open dialog count.",
}

_GET_ACCESSIBILITY_SNAPSHOT_SCHEMA = {
    "name": "get_accessibility_snapshot",
    "description": "Accessibility tree of the page (RECOMMENDED for page state).",
}

_EVALUATE_READONLY_SCHEMA = {
    "name": "evaluate_readonly",
    "description": "Evaluate a JavaScript expression in the page and return its value.",
}

_GET_CONSOLE_LOGS_SCHEMA = {
    "name": "get_console_logs",
    "description": "Buffered console messages, oldest first.",
}

_GET_NETWORK_FAILURES_SCHEMA = {
    "name": "get_network_failures",
    "description": "Buffered failed network requests, oldest first.",
}

_WAIT_FOR_LOAD_STATE_SCHEMA = {
    "name": "wait_for_load_state",
    "description": "Wait until the page reaches load, domcontentloaded or networkidle (default).",
}

_SOLVE_CAPTCHA_SCHEMA = {
    "name": "solve_captcha",
    "description": (
        "Best effort: click a reCAPTCHA checkbox or an \"I'm not a robot\" label. "
        "The result is informational only."
    ),
}

_GET_CONTENT_SCHEMA = {
    "name": "get_content",
    "description": "Full page HTML (Expensive).",
}

_SCREENSHOT_SCHEMA = {
    "name": "screenshot",
    "description": "Take a screenshot of the current page, saved to path if given.",
}

_CLOSE_BROWSER_SCHEMA = {
    "name": "close_browser",
    "description": "Close the browser and clear all session state.",
}


def _to_json(value: Any) -> str:
    return json.dumps(value, default=str, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------

class BrowserToolProvider(ToolProvider):
    """Playwright-backed browser tools over one BrowserSession."""

    def __init__(self, session: BrowserSession, output_limit: int = DEFAULT_OUTPUT_LIMIT):
        super().__init__()
        self.session = session
        self.output_limit = output_limit

        # Lifecycle
        self.register_tool(_LAUNCH_BROWSER_SCHEMA, self._handle_launch_browser, LaunchBrowserInput)
        self.register_tool(_CLOSE_BROWSER_SCHEMA, self._handle_close_browser, NoParamsInput)
        # Interaction
        self.register_tool(_NAVIGATE_ACTION_SCHEMA, self._handle_navigate_action, NavigateActionInput)
        self.register_tool(_MOUSE_ACTION_SCHEMA, self._handle_mouse_action, MouseActionInput)
        self.register_tool(_FORM_ACTION_SCHEMA, self._handle_form_action, FormActionInput)
        self.register_tool(_ELEMENT_ACTION_SCHEMA, self._handle_element_action, ElementActionInput)
        self.register_tool(_SMART_CLICK_SCHEMA, self._handle_smart_click, SmartClickInput)
        self.register_tool(_SOLVE_CAPTCHA_SCHEMA, self._handle_solve_captcha, NoParamsInput)
        self.register_tool(_WAIT_FOR_LOAD_STATE_SCHEMA, self._handle_wait_for_load_state, WaitForLoadStateInput)
        # Page state & extraction
        self.register_tool(_GET_PAGE_STATE_SCHEMA, self._handle_get_page_state, NoParamsInput)
        self.register_tool(
            _GET_ACCESSIBILITY_SNAPSHOT_SCHEMA, self._handle_get_accessibility_snapshot, NoParamsInput
        )
        self.register_tool(_EVALUATE_READONLY_SCHEMA, self._handle_evaluate_readonly, EvaluateInput)
        self.register_tool(_GET_CONTENT_SCHEMA, self._handle_get_content, NoParamsInput)
        self.register_tool(_SCREENSHOT_SCHEMA, self._handle_screenshot, ScreenshotInput)
        # Signals
        self.register_tool(_GET_CONSOLE_LOGS_SCHEMA, self._handle_get_console_logs, NoParamsInput)
        self.register_tool(_GET_NETWORK_FAILURES_SCHEMA, self._handle_get_network_failures, NoParamsInput)

    async def close(self) -> None:
        await self.session.close()

    def _truncate(self, text: str) -> str:
        if len(text) > self.output_limit:
            return text[: self.output_limit] + "\n... (truncated)"
        return text

    # ------------------------------------------------------------------
    # Tool handlers — each takes a validated request, returns str
    # ------------------------------------------------------------------

    async def _handle_launch_browser(self, req: LaunchBrowserInput) -> str:
        started = await self.session.launch(headless=req.headless, engine=req.engine)
        if not started:
            return "Browser already running"
        return f"Launched {req.engine or self.session.config.browser.engine}"

    async def _handle_close_browser(self, req: NoParamsInput) -> str:
        await self.session.close()
        return "closed"

    async def _handle_navigate_action(self, req: NavigateActionInput) -> str:
        await self.session.navigation_action(req.action, url=req.url, tab_index=req.tab_index)
        return "ok"

    async def _handle_mouse_action(self, req: MouseActionInput) -> str:
        await self.session.mouse_action(req)
        return "ok"

    async def _handle_form_action(self, req: FormActionInput) -> str:
        await self.session.form_action(req)
        return "ok"

    async def _handle_element_action(self, req: ElementActionInput) -> str:
        return _to_json(await self.session.element_action(req))

    async def _handle_smart_click(self, req: SmartClickInput) -> str:
        return await self.session.smart_click(req.selector)

    async def _handle_solve_captcha(self, req: NoParamsInput) -> str:
        outcome = await self.session.solve_captcha()
        return outcome.value

    async def _handle_wait_for_load_state(self, req: WaitForLoadStateInput) -> str:
        await self.session.wait_for_load_state(req.state)
        return "waited"

    async def _handle_get_page_state(self, req: NoParamsInput) -> str:
        state = await self.session.get_page_state()
        return _to_json(state.to_dict())

    async def _handle_get_accessibility_snapshot(self, req: NoParamsInput) -> str:
        return self._truncate(_to_json(await self.session.get_accessibility_snapshot()))

    async def _handle_evaluate_readonly(self, req: EvaluateInput) -> str:
        result = await self.session.evaluate_readonly(req.expression)
        if isinstance(result, str):
            return self._truncate(result)
        return self._truncate(_to_json(result))

    async def _handle_get_content(self, req: NoParamsInput) -> str:
        return self._truncate(await self.session.content())

    async def _handle_screenshot(self, req: ScreenshotInput) -> str:
        return await self.session.screenshot(path=req.path, full_page=req.full_page)

    async def _handle_get_console_logs(self, req: NoParamsInput) -> str:
        return _to_json(self.session.get_console_logs())

    async def _handle_get_network_failures(self, req: NoParamsInput) -> str:
        return _to_json(self.session.get_network_failures())
