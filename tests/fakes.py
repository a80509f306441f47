"""In-memory stand-ins for the Playwright objects the session touches.

Pages know which CSS selectors, button names and texts are "visible"; every
interaction is appended to ``page.calls`` so tests can assert on it.
"""

from __future__ import annotations

from collections import defaultdict
from types import SimpleNamespace
from typing import Any

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from browser_session import BrowserSession
from config import ServerConfig


class FakeLocator:
    def __init__(self, page: FakePage, key: str, present: bool):
        self.page = page
        self.key = key
        self.present = present

    @property
    def first(self) -> FakeLocator:
        return self

    def _record(self, *call: Any) -> None:
        self.page.calls.append(call)

    async def wait_for(self, state: str = "visible", timeout: float | None = None) -> None:
        self._record("wait_for", self.key, state)
        if state in ("visible", "attached") and not self.present:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {self.key}")

    async def click(self, button: str = "left", **kwargs: Any) -> None:
        if not self.present:
            raise PlaywrightTimeoutError(f"Timeout waiting for {self.key}")
        self._record("click", self.key, button)

    async def dblclick(self) -> None:
        self._record("dblclick", self.key)

    async def hover(self) -> None:
        self._record("hover", self.key)

    async def fill(self, value: str) -> None:
        self._record("fill", self.key, value)

    async def select_option(self, value: Any) -> None:
        self._record("select_option", self.key, value)

    async def check(self) -> None:
        self._record("check", self.key)

    async def uncheck(self) -> None:
        self._record("uncheck", self.key)

    async def set_input_files(self, path: str) -> None:
        self._record("set_input_files", self.key, path)

    async def focus(self) -> None:
        self._record("focus", self.key)

    async def evaluate(self, expression: str) -> Any:
        self._record("evaluate", self.key, expression)

    async def text_content(self) -> str | None:
        return self.page.text_for.get(self.key)

    async def input_value(self) -> str:
        return self.page.values.get(self.key, "")

    async def get_attribute(self, name: str) -> str | None:
        return self.page.attrs.get((self.key, name))

    async def is_visible(self) -> bool:
        return self.present

    async def is_enabled(self) -> bool:
        return self.key not in self.page.disabled

    async def aria_snapshot(self) -> str:
        return self.page.aria


class FakeFrame:
    def __init__(self, page: FakePage, url: str, checkbox_visible: bool = False):
        self.page = page
        self.url = url
        self.checkbox_visible = checkbox_visible

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self.page, f"frame:{selector}", self.checkbox_visible)


class FakeMouse:
    def __init__(self, page: FakePage):
        self.page = page

    async def wheel(self, delta_x: float, delta_y: float) -> None:
        self.page.calls.append(("wheel", delta_x, delta_y))


class FakePage:
    def __init__(self, context: FakeContext | None = None, url: str = "about:blank"):
        self.context = context
        self.url = url
        self.closed = False
        self.handlers: dict[str, list] = defaultdict(list)
        self.calls: list[tuple] = []
        self.visible_css: set[str] = set()
        self.buttons: set[str] = set()
        self.texts: set[str] = set()
        self.text_for: dict[str, str] = {}
        self.values: dict[str, str] = {}
        self.attrs: dict[tuple[str, str], str] = {}
        self.disabled: set[str] = set()
        self.frames: list[FakeFrame] = [FakeFrame(self, url)]
        self.eval_result: Any = None
        self.html = "<html><body></body></html>"
        self.aria = '- heading "Example" [level=1]'
        self.mouse = FakeMouse(self)

    def on(self, event: str, handler: Any) -> None:
        self.handlers[event].append(handler)

    def emit(self, event: str, arg: Any) -> None:
        for handler in list(self.handlers[event]):
            handler(arg)

    def emit_console(self, type_: str, text: str) -> None:
        self.emit("console", SimpleNamespace(type=type_, text=text))

    def emit_request_failed(self, url: str, method: str = "GET", failure: str | None = "net::ERR_FAILED") -> None:
        self.emit("requestfailed", SimpleNamespace(url=url, method=method, failure=failure))

    def is_closed(self) -> bool:
        return self.closed

    async def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self.context is not None and self in self.context.pages:
            self.context.pages.remove(self)
        self.emit("close", self)

    async def goto(self, url: str, wait_until: str | None = None, timeout: float | None = None) -> None:
        self.url = url
        self.calls.append(("goto", url, wait_until))

    async def reload(self) -> None:
        self.calls.append(("reload",))

    async def go_back(self) -> None:
        self.calls.append(("go_back",))

    async def go_forward(self) -> None:
        self.calls.append(("go_forward",))

    async def bring_to_front(self) -> None:
        self.calls.append(("bring_to_front",))

    async def wait_for_load_state(self, state: str) -> None:
        self.calls.append(("wait_for_load_state", state))

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector, selector in self.visible_css)

    def get_by_role(self, role: str, name: str | None = None) -> FakeLocator:
        return FakeLocator(self, f"role={role}[name={name}]", role == "button" and name in self.buttons)

    def get_by_text(self, text: str, exact: bool = False) -> FakeLocator:
        return FakeLocator(self, f"text={text}", text in self.texts)

    async def drag_and_drop(self, source: str, target: str) -> None:
        self.calls.append(("drag_and_drop", source, target))

    async def evaluate(self, expression: str) -> Any:
        self.calls.append(("evaluate", expression))
        return self.eval_result

    async def content(self) -> str:
        return self.html

    async def screenshot(self, path: str | None = None, full_page: bool = False) -> bytes:
        self.calls.append(("screenshot", path, full_page))
        return b"\x89PNG fake"


class FakeContext:
    def __init__(self):
        self.pages: list[FakePage] = []

    async def new_page(self) -> FakePage:
        page = FakePage(self)
        self.pages.append(page)
        return page

    async def close(self) -> None:
        for page in list(self.pages):
            await page.close()


class FakeBrowser:
    def __init__(self):
        self.connected = True
        self.handlers: dict[str, list] = defaultdict(list)
        self.contexts: list[FakeContext] = []

    def on(self, event: str, handler: Any) -> None:
        self.handlers[event].append(handler)

    def is_connected(self) -> bool:
        return self.connected

    async def new_context(self) -> FakeContext:
        context = FakeContext()
        self.contexts.append(context)
        return context

    def crash(self) -> None:
        self.connected = False
        for handler in list(self.handlers["disconnected"]):
            handler(self)

    async def close(self) -> None:
        if self.connected:
            self.crash()


class FakeBrowserType:
    def __init__(self, name: str):
        self.name = name
        self.launches: list[dict[str, Any]] = []
        self.browsers: list[FakeBrowser] = []
        self.error: Exception | None = None

    async def launch(self, **kwargs: Any) -> FakeBrowser:
        self.launches.append(kwargs)
        if self.error is not None:
            raise self.error
        browser = FakeBrowser()
        self.browsers.append(browser)
        return browser


class FakePlaywright:
    def __init__(self):
        self.chromium = FakeBrowserType("chromium")
        self.firefox = FakeBrowserType("firefox")
        self.webkit = FakeBrowserType("webkit")
        self.starts = 0
        self.stops = 0

    def manager(self) -> SimpleNamespace:
        async def start() -> FakePlaywright:
            self.starts += 1
            return self

        return SimpleNamespace(start=start)

    async def stop(self) -> None:
        self.stops += 1


def make_session(config: ServerConfig | None = None) -> tuple[BrowserSession, FakePlaywright]:
    pw = FakePlaywright()
    return BrowserSession(config, playwright_factory=pw.manager), pw
