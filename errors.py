"""Error kinds raised by the session, the dispatchers and the tool registry.

Every one of these is caught at the registry boundary and turned into an
error-flagged tool result, so the message should read well on its own.
"""

from __future__ import annotations


class BrowserToolError(Exception):
    """Base class for all tool-level failures."""


class NotInitializedError(BrowserToolError):
    """No live page is available (browser not launched, or every tab closed)."""


class NotFoundError(BrowserToolError):
    """A tab index or named resource does not exist."""


class UnsupportedActionError(BrowserToolError):
    """An action type / category string is not part of its family."""


class ElementNotFoundError(BrowserToolError):
    """Every self-healing locator strategy failed for a selector."""

    def __init__(self, selector: str):
        super().__init__(f"smart_click failed to find element: {selector}")
        self.selector = selector


class InitializationError(BrowserToolError):
    """The browser process could not be started."""


class MethodNotFound(BrowserToolError):
    """Unknown tool name."""

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class InvalidArgumentsError(BrowserToolError):
    """Tool arguments failed validation at the boundary."""
