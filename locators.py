"""Self-healing element lookup for smart_click.

A selector string may be a CSS/structural selector, the accessible name of a
button, or plain visible text. Strategies are tried in a fixed order and the
first one whose element turns visible within the timeout wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from errors import ElementNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 3000


@dataclass(frozen=True)
class LocatorStrategy:
    name: str
    resolve: Callable[[Page, str], Locator]


STRATEGIES: tuple[LocatorStrategy, ...] = (
    LocatorStrategy("locator", lambda page, selector: page.locator(selector)),
    LocatorStrategy("role", lambda page, selector: page.get_by_role("button", name=selector)),
    LocatorStrategy("text", lambda page, selector: page.get_by_text(selector)),
)


async def smart_click(
    page: Page,
    selector: str,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    strategies: tuple[LocatorStrategy, ...] = STRATEGIES,
) -> str:
    """Click the first element any strategy resolves; report which strategy worked."""
    for strategy in strategies:
        try:
            loc = strategy.resolve(page, selector).first
            await loc.wait_for(state="visible", timeout=timeout_ms)
            await loc.click()
        except PlaywrightError as e:
            logger.debug(f"[smart_click] strategy '{strategy.name}' missed '{selector}': {e}")
            continue
        logger.info(f"[smart_click] clicked '{selector}' using strategy: {strategy.name}")
        return f"Clicked element using '{strategy.name}' strategy matching '{selector}'"
    raise ElementNotFoundError(selector)
