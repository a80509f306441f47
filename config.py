"""Parse and validate server configuration JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

ENGINES = ("chromium", "firefox", "webkit")

ANTI_DETECTION_ARGS = (
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-infobars",
)


@dataclass
class BrowserConfig:
    headless: bool = True
    engine: str = "chromium"
    launch_args: list[str] = field(default_factory=lambda: list(ANTI_DETECTION_ARGS))


@dataclass
class BufferLimits:
    console_logs: int = 500
    network_failures: int = 200


@dataclass
class Timeouts:
    navigation_ms: int = 30000
    smart_click_ms: int = 3000
    captcha_ms: int = 5000


@dataclass
class ServerConfig:
    server_name: str = "playwright-mcp-server"
    server_version: str = "1.0.0"
    max_output_chars: int = 8000
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    limits: BufferLimits = field(default_factory=BufferLimits)
    timeouts: Timeouts = field(default_factory=Timeouts)


def _positive(section: str, key: str, value: Any) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"{section}.{key} must be a positive integer, got {value!r}")
    return value


def load_config(path: str | Path | None = None) -> ServerConfig:
    """Load a server config from a JSON file, or return defaults when *path* is None."""
    if path is None:
        return ServerConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError("Config root must be a JSON object")

    # Browser
    browser_raw = raw.get("browser", {})
    engine = browser_raw.get("engine", BrowserConfig.engine)
    if engine not in ENGINES:
        raise ValueError(f"Unknown browser engine: {engine} (expected one of {', '.join(ENGINES)})")
    browser = BrowserConfig(
        headless=bool(browser_raw.get("headless", BrowserConfig.headless)),
        engine=engine,
        launch_args=list(browser_raw.get("launch_args", ANTI_DETECTION_ARGS)),
    )

    # Buffers
    limits_raw = raw.get("limits", {})
    limits = BufferLimits(
        console_logs=_positive("limits", "console_logs", limits_raw.get("console_logs", BufferLimits.console_logs)),
        network_failures=_positive(
            "limits", "network_failures", limits_raw.get("network_failures", BufferLimits.network_failures)
        ),
    )

    # Timeouts
    timeouts_raw = raw.get("timeouts", {})
    timeouts = Timeouts(
        **{
            key: _positive("timeouts", key, timeouts_raw.get(key, getattr(Timeouts, key)))
            for key in ("navigation_ms", "smart_click_ms", "captcha_ms")
        }
    )

    return ServerConfig(
        server_name=raw.get("server_name", ServerConfig.server_name),
        server_version=raw.get("server_version", ServerConfig.server_version),
        max_output_chars=_positive("root", "max_output_chars", raw.get("max_output_chars", ServerConfig.max_output_chars)),
        browser=browser,
        limits=limits,
        timeouts=timeouts,
    )
