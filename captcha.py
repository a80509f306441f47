"""Best-effort CAPTCHA checkbox clicker.

Only two shapes are recognised: a reCAPTCHA v2 anchor iframe, and a visible
"I'm not a robot" label. The returned outcome is informational; it never
means a challenge was actually cleared.
"""

from __future__ import annotations

import logging
from enum import Enum

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

logger = logging.getLogger(__name__)

RECAPTCHA_FRAME_SIGNATURE = "recaptcha/api2/anchor"
RECAPTCHA_CHECKBOX_SELECTOR = ".recaptcha-checkbox-border, #recaptcha-anchor"
NOT_A_ROBOT_TEXT = "I'm not a robot"


class CaptchaOutcome(str, Enum):
    CLICKED_CHECKBOX = "Clicked reCAPTCHA checkbox. Please wait for verification."
    CHECKBOX_FAILED = "Found reCAPTCHA but failed to click it."
    CLICKED_TEXT = "Clicked 'I'm not a robot' text."
    NOT_FOUND = "No known CAPTCHA found or solved."


async def solve_captcha(page: Page, timeout_ms: int = 5000) -> CaptchaOutcome:
    logger.info("[solve_captcha] Looking for a known CAPTCHA...")

    frame = next((f for f in page.frames if RECAPTCHA_FRAME_SIGNATURE in f.url), None)
    if frame is not None:
        logger.info("[solve_captcha] Found reCAPTCHA frame, clicking checkbox")
        try:
            checkbox = frame.locator(RECAPTCHA_CHECKBOX_SELECTOR).first
            await checkbox.wait_for(state="visible", timeout=timeout_ms)
            await checkbox.click()
        except PlaywrightError as e:
            logger.warning(f"[solve_captcha] Failed to click reCAPTCHA checkbox: {e}")
            return CaptchaOutcome.CHECKBOX_FAILED
        return CaptchaOutcome.CLICKED_CHECKBOX

    # Fallback: plain "I'm not a robot" label
    try:
        label = page.get_by_text(NOT_A_ROBOT_TEXT, exact=False).first
        if await label.is_visible():
            await label.click()
            return CaptchaOutcome.CLICKED_TEXT
    except PlaywrightError as e:
        logger.debug(f"[solve_captcha] Text fallback failed: {e}")

    return CaptchaOutcome.NOT_FOUND
