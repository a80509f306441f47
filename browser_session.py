"""Playwright browser session: process, context, tabs and signal buffers.

One BrowserSession owns at most one browser process. Every page-scoped
operation goes through ensure_active_page(), which is also what turns a
disconnected or fully-closed browser into a clean NotInitializedError.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable

from playwright.async_api import (
    Browser,
    BrowserContext,
    ConsoleMessage,
    Page,
    Playwright,
    Request,
    async_playwright,
)

import actions
import captcha
import locators
from config import ENGINES, ServerConfig
from errors import InitializationError, NotFoundError, NotInitializedError, UnsupportedActionError
from tool_inputs import ElementActionInput, FormActionInput, MouseActionInput

logger = logging.getLogger(__name__)

PAGE_STATE_SCRIPT = """() => ({
    url: location.href,
    title: document.title,
    buttons: [...document.querySelectorAll("button")].map(b => b.textContent?.trim()).filter(Boolean),
    inputs: [...document.querySelectorAll("input")].map(i => i.getAttribute("name") || i.placeholder),
    dialogs: document.querySelectorAll('[role="dialog"]').length
})"""


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass
class ConsoleEntry:
    type: str
    text: str


@dataclass
class NetworkFailure:
    url: str
    method: str
    error: str | None


@dataclass
class PageState:
    url: str
    title: str
    buttons: list[str] = field(default_factory=list)
    inputs: list[str] = field(default_factory=list)
    dialogs: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

class BrowserSession:
    """Owns the browser process handle, its context, open pages and buffers."""

    def __init__(
        self,
        config: ServerConfig | None = None,
        playwright_factory: Callable[[], Any] = async_playwright,
    ):
        self.config = config or ServerConfig()
        self._playwright_factory = playwright_factory
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._pages: list[Page] = []
        self._page: Page | None = None
        self._console_logs: deque[ConsoleEntry] = deque(maxlen=self.config.limits.console_logs)
        self._network_failures: deque[NetworkFailure] = deque(maxlen=self.config.limits.network_failures)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    @property
    def pages(self) -> list[Page]:
        return list(self._pages)

    @property
    def current_page(self) -> Page | None:
        return self._page

    async def launch(self, headless: bool | None = None, engine: str | None = None) -> bool:
        """Start a browser unless one is already live. Returns False when it was a no-op."""
        if self.is_running:
            return False

        headless = self.config.browser.headless if headless is None else headless
        engine = engine or self.config.browser.engine
        if engine not in ENGINES:
            raise UnsupportedActionError(f"Unknown browser engine: {engine}")

        # A previous process may have disconnected without an explicit close
        await self._stop_playwright()

        try:
            self._playwright = await self._playwright_factory().start()
            launcher = getattr(self._playwright, engine)
            args = list(self.config.browser.launch_args) if engine == "chromium" else []
            self._browser = await launcher.launch(headless=headless, args=args)
            self._browser.on("disconnected", self._on_disconnected)
            self._context = await self._browser.new_context()
            page = await self._context.new_page()
        except Exception as e:
            await self.close()
            raise InitializationError(f"Failed to launch {engine}: {e}") from e

        self._track_page(page)
        self._pages = [page]
        self._page = page
        logger.info(f"Launched {engine} (headless={headless})")
        return True

    async def close(self) -> None:
        """Release the browser and clear all state, even after a partial launch."""
        browser = self._browser
        self._reset()
        try:
            if browser is not None:
                await browser.close()
        except Exception as e:
            logger.debug(f"Browser close error: {e}")
        finally:
            await self._stop_playwright()
        logger.info("Browser session closed")

    def _reset(self) -> None:
        self._browser = None
        self._context = None
        self._page = None
        self._pages = []
        self._console_logs.clear()
        self._network_failures.clear()

    async def _stop_playwright(self) -> None:
        pw, self._playwright = self._playwright, None
        if pw is None:
            return
        try:
            await pw.stop()
        except Exception as e:
            logger.debug(f"Playwright stop error: {e}")

    def _on_disconnected(self, browser: Browser) -> None:
        if browser is not self._browser:
            return
        logger.warning("Browser disconnected; session state reset")
        self._reset()

    def ensure_active_page(self) -> Page:
        if self._page is not None and not self._page.is_closed():
            return self._page
        for page in self._pages:
            if not page.is_closed():
                self._page = page
                return page
        raise NotInitializedError("Browser not initialized or page closed")

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def _track_page(self, page: Page) -> None:
        page.on("console", self._on_console)
        page.on("requestfailed", self._on_request_failed)
        page.on("close", self._on_page_closed)

    def _on_console(self, msg: ConsoleMessage) -> None:
        self._console_logs.append(ConsoleEntry(type=msg.type, text=msg.text))

    def _on_request_failed(self, request: Request) -> None:
        self._network_failures.append(
            NetworkFailure(url=request.url, method=request.method, error=request.failure)
        )

    def _on_page_closed(self, page: Page) -> None:
        if page in self._pages:
            self._pages.remove(page)
        if self._page is page:
            self._page = self._pages[0] if self._pages else None

    # ------------------------------------------------------------------
    # Navigation & tabs
    # ------------------------------------------------------------------

    async def navigate(self, url: str) -> None:
        await self.ensure_active_page().goto(
            url, wait_until="domcontentloaded", timeout=self.config.timeouts.navigation_ms
        )

    async def reload(self) -> None:
        await self.ensure_active_page().reload()

    async def back(self) -> None:
        await self.ensure_active_page().go_back()

    async def forward(self) -> None:
        await self.ensure_active_page().go_forward()

    async def open_tab(self, url: str | None = None) -> Page:
        if self._context is None:
            raise NotInitializedError("Browser context not ready")
        page = await self._context.new_page()
        self._track_page(page)
        self._pages.append(page)
        self._page = page
        logger.info(f"Opened tab {len(self._pages) - 1}")
        if url:
            await page.goto(url, wait_until="domcontentloaded", timeout=self.config.timeouts.navigation_ms)
        return page

    async def switch_tab(self, index: int) -> Page:
        self.ensure_active_page()
        if index < 0 or index >= len(self._pages):
            raise NotFoundError(f"Tab index {index} not found. {len(self._pages)} tabs open.")
        self._page = self._pages[index]
        await self._page.bring_to_front()
        return self._page

    async def close_tab(self) -> None:
        page = self.ensure_active_page()
        await page.close()
        if page in self._pages:
            self._pages.remove(page)
        self._page = self._pages[0] if self._pages else None
        logger.info(f"Closed tab, {len(self._pages)} remaining")

    async def navigation_action(self, action: str, url: str | None = None, tab_index: int | None = None) -> None:
        if action == "open":
            await self.navigate(url)
        elif action == "reload":
            await self.reload()
        elif action == "back":
            await self.back()
        elif action == "forward":
            await self.forward()
        elif action == "new_tab":
            await self.open_tab(url)
        elif action == "switch_tab":
            await self.switch_tab(tab_index)
        elif action == "close_tab":
            await self.close_tab()
        else:
            raise UnsupportedActionError(f"Unknown navigate action: {action}")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def mouse_action(self, req: MouseActionInput) -> None:
        await actions.mouse_action(self.ensure_active_page(), req)

    async def form_action(self, req: FormActionInput) -> None:
        await actions.form_action(self.ensure_active_page(), req)

    async def element_action(self, req: ElementActionInput) -> Any:
        return await actions.element_action(self.ensure_active_page(), req)

    async def smart_click(self, selector: str) -> str:
        return await locators.smart_click(
            self.ensure_active_page(), selector, timeout_ms=self.config.timeouts.smart_click_ms
        )

    async def solve_captcha(self) -> captcha.CaptchaOutcome:
        return await captcha.solve_captcha(self.ensure_active_page(), timeout_ms=self.config.timeouts.captcha_ms)

    # ------------------------------------------------------------------
    # Page state & signals
    # ------------------------------------------------------------------

    async def get_page_state(self) -> PageState:
        raw = await self.ensure_active_page().evaluate(PAGE_STATE_SCRIPT)
        return PageState(
            url=raw.get("url", ""),
            title=raw.get("title", ""),
            buttons=raw.get("buttons", []),
            inputs=raw.get("inputs", []),
            dialogs=raw.get("dialogs", 0),
        )

    async def get_accessibility_snapshot(self) -> dict[str, Any]:
        page = self.ensure_active_page()
        snapshot = await page.locator("body").aria_snapshot()
        return {"url": page.url, "snapshot": snapshot}

    async def evaluate_readonly(self, expression: str) -> Any:
        return await self.ensure_active_page().evaluate(f"() => ({expression})")

    async def content(self) -> str:
        return await self.ensure_active_page().content()

    async def screenshot(self, path: str | None = None, full_page: bool = False) -> str:
        page = self.ensure_active_page()
        if path:
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            await page.screenshot(path=path, full_page=full_page)
            return f"Screenshot saved to {path}"
        data = await page.screenshot(full_page=full_page)
        return f"Screenshot captured ({len(data)} bytes)"

    def get_console_logs(self) -> list[dict[str, Any]]:
        return [asdict(entry) for entry in self._console_logs]

    def get_network_failures(self) -> list[dict[str, Any]]:
        return [asdict(entry) for entry in self._network_failures]

    async def wait_for_load_state(self, state: str = "networkidle") -> None:
        await self.ensure_active_page().wait_for_load_state(state)
