"""Request models, one per tool.

Argument bags arrive as loose JSON objects. Each tool validates its bag into
one of these models before the handler runs, and the tool's input schema is
generated from the same model. Action ``type`` strings are left as plain
strings here: the dispatch tables own the closed enumerations and reject
unknown types themselves.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

NAVIGATION_TYPES = ("open", "reload", "back", "forward", "new_tab", "switch_tab", "close_tab")
MOUSE_TYPES = ("click", "double_click", "right_click", "hover", "drag_drop", "scroll")
FORM_TYPES = ("fill", "select", "check", "uncheck", "radio", "submit", "upload", "clear")
ELEMENT_TYPES = ("focus", "blur", "read_text", "read_value", "read_attr", "is_visible", "is_enabled", "wait")

LoadState = Literal["load", "domcontentloaded", "networkidle"]
ElementState = Literal["attached", "detached", "visible", "hidden"]
Engine = Literal["chromium", "firefox", "webkit"]


class ToolInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class NoParamsInput(ToolInput):
    pass


class LaunchBrowserInput(ToolInput):
    headless: bool | None = Field(default=None, description="Run without a visible window (server default if omitted).")
    engine: Engine | None = Field(default=None, alias="engineVariant", description="Browser engine (server default if omitted).")


class NavigateActionInput(ToolInput):
    action: str = Field(json_schema_extra={"enum": list(NAVIGATION_TYPES)})
    url: str | None = Field(default=None, description="Target URL for open, optional for new_tab.")
    tab_index: int | None = Field(default=None, alias="tabIndex", description="0-based tab index for switch_tab.")

    @model_validator(mode="after")
    def _check_required(self) -> NavigateActionInput:
        if self.action == "open" and not self.url:
            raise ValueError("url is required for action 'open'")
        if self.action == "switch_tab" and self.tab_index is None:
            raise ValueError("tabIndex is required for action 'switch_tab'")
        return self


class MouseActionInput(ToolInput):
    type: str = Field(json_schema_extra={"enum": list(MOUSE_TYPES)})
    selector: str | None = Field(default=None, description="Element to act on (first match).")
    target_selector: str | None = Field(default=None, alias="targetSelector", description="Drop target for drag_drop.")
    amount: int | None = Field(default=None, description="Vertical wheel delta in pixels for scroll (default 500).")

    @model_validator(mode="after")
    def _check_required(self) -> MouseActionInput:
        if self.type in MOUSE_TYPES and self.type != "scroll" and not self.selector:
            raise ValueError(f"selector is required for mouse action '{self.type}'")
        if self.type == "drag_drop" and not self.target_selector:
            raise ValueError("targetSelector is required for mouse action 'drag_drop'")
        return self


class FormActionInput(ToolInput):
    type: str = Field(json_schema_extra={"enum": list(FORM_TYPES)})
    selector: str
    value: str | list[str] | None = Field(default=None, description="Text for fill, option value(s) for select.")
    file_path: str | None = Field(default=None, alias="filePath", description="Local file for upload.")

    @model_validator(mode="after")
    def _check_required(self) -> FormActionInput:
        if self.type in ("fill", "select") and self.value is None:
            raise ValueError(f"value is required for form action '{self.type}'")
        if self.type == "fill" and not isinstance(self.value, str):
            raise ValueError("value must be a string for form action 'fill'")
        if self.type == "upload" and not self.file_path:
            raise ValueError("filePath is required for form action 'upload'")
        return self


class ElementActionInput(ToolInput):
    type: str = Field(json_schema_extra={"enum": list(ELEMENT_TYPES)})
    selector: str
    attribute: str | None = Field(default=None, description="Attribute name for read_attr.")
    state: ElementState = Field(default="visible", description="State to wait for.")

    @model_validator(mode="after")
    def _check_required(self) -> ElementActionInput:
        if self.type == "read_attr" and not self.attribute:
            raise ValueError("attribute is required for element action 'read_attr'")
        return self


class SmartClickInput(ToolInput):
    selector: str = Field(description="CSS selector, button name, or visible text.")


class EvaluateInput(ToolInput):
    expression: str = Field(description="JavaScript expression evaluated in the page.")


class WaitForLoadStateInput(ToolInput):
    state: LoadState = "networkidle"


class ScreenshotInput(ToolInput):
    path: str | None = Field(default=None, description="Where to save the PNG.")
    full_page: bool = Field(default=False, alias="fullPage")
