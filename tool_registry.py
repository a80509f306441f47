"""Tool provider base class and registry.

To add a new tool category:
1. Subclass ToolProvider
2. In __init__, call self.register_tool(schema, handler, input_model) for each tool
3. Register the provider instance with a ToolRegistry

The MCP server calls registry.get_tool_schemas() for tools/list and
registry.call() for tools/call. call() is the error boundary: whatever goes
wrong inside a handler comes back as an error-flagged ToolResult.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError

from errors import InvalidArgumentsError, MethodNotFound

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[str]]


@dataclass(frozen=True)
class ToolResult:
    """A single text payload; ``is_error`` marks failures."""

    text: str
    is_error: bool = False


class ToolProvider:
    """Base class for tool providers.

    Subclass this to create a new tool category. Each tool is a
    (schema, handler, input_model) triple registered in __init__:

        class MyProvider(ToolProvider):
            def __init__(self, ...):
                super().__init__()
                self.register_tool(
                    {"name": "my_tool", "description": "..."},
                    self._handle_my_tool,
                    MyToolInput,
                )

            async def _handle_my_tool(self, req: MyToolInput) -> str:
                ...

    When the schema has no "input_schema", it is generated from the model.
    """

    def __init__(self):
        self._tools: dict[str, _RegisteredTool] = {}

    def register_tool(
        self,
        schema: dict[str, Any],
        handler: Handler,
        input_model: type[BaseModel],
    ) -> None:
        name = schema["name"]
        if name in self._tools:
            raise ValueError(f"Tool '{name}' already registered in this provider")
        schema = dict(schema)
        schema.setdefault("input_schema", input_model.model_json_schema(by_alias=True))
        self._tools[name] = _RegisteredTool(schema=schema, handler=handler, input_model=input_model)

    def get_tool_schemas(self) -> list[dict[str, Any]]:
        return [t.schema for t in self._tools.values()]

    def handles(self, tool_name: str) -> bool:
        return tool_name in self._tools

    async def execute(self, tool_name: str, tool_input: dict[str, Any] | None) -> str:
        entry = self._tools.get(tool_name)
        if entry is None:
            raise MethodNotFound(tool_name)
        try:
            req = entry.input_model.model_validate(tool_input or {})
        except ValidationError as e:
            raise InvalidArgumentsError(_format_validation_error(tool_name, e)) from e
        return await entry.handler(req)

    async def close(self) -> None:
        """Override to clean up resources (browser sessions, subprocesses, etc.)."""
        pass


class _RegisteredTool:
    __slots__ = ("schema", "handler", "input_model")

    def __init__(
        self,
        schema: dict[str, Any],
        handler: Handler,
        input_model: type[BaseModel],
    ):
        self.schema = schema
        self.handler = handler
        self.input_model = input_model


def _format_validation_error(tool_name: str, error: ValidationError) -> str:
    problems = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"])
        problems.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return f"Invalid arguments for {tool_name}: " + "; ".join(problems)


class ToolRegistry:
    """Aggregates multiple ToolProviders into one dispatch surface.

    Usage:
        registry = ToolRegistry()
        registry.register(BrowserToolProvider(session))

        schemas = registry.get_tool_schemas()          # tools/list
        result  = await registry.call(name, arguments)  # tools/call
    """

    def __init__(self):
        self._providers: list[ToolProvider] = []

    def register(self, provider: ToolProvider) -> None:
        self._providers.append(provider)

    def get_tool_schemas(self) -> list[dict[str, Any]]:
        schemas: list[dict[str, Any]] = []
        for p in self._providers:
            schemas.extend(p.get_tool_schemas())
        return schemas

    async def execute(self, tool_name: str, tool_input: dict[str, Any] | None) -> str:
        for p in self._providers:
            if p.handles(tool_name):
                return await p.execute(tool_name, tool_input)
        raise MethodNotFound(tool_name)

    async def call(self, tool_name: str, tool_input: dict[str, Any] | None) -> ToolResult:
        try:
            text = await self.execute(tool_name, tool_input)
        except Exception as e:  # noqa: BLE001
            logger.warning(f"Tool {tool_name} failed: {e}")
            return ToolResult(text=f"Error: {e}", is_error=True)
        return ToolResult(text=text)

    async def close(self) -> None:
        for p in self._providers:
            await p.close()
