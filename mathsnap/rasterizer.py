"""
Rasterization sessions backed by headless Chromium (Playwright).

A session is one browser + one page with a fixed viewport and device pixel
ratio. The pipeline opens exactly one session per request and reuses it for
every formula; sessions are never shared between requests.

Usage:
    rasterizer = PlaywrightRasterizer()
    async with rasterizer.session(scale=2) as session:
        await session.load_markup(document)
        png = await session.capture_element(".wrap", omit_background=True)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, List, Optional, Protocol

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from config.constants import (
    BROWSER_ARGS,
    PAGE_LOAD_TIMEOUT_MS,
    VIEWPORT_HEIGHT,
    VIEWPORT_WIDTH,
)
from .errors import RasterizerError, RenderContainerMissingError, RenderSizingError

logger = logging.getLogger(__name__)


class RasterSession(Protocol):
    """A loaded page that can be screenshotted element by element"""

    async def load_markup(self, html: str) -> None:
        ...

    async def capture_element(self, selector: str, omit_background: bool = False) -> bytes:
        """
        Screenshot one element as PNG.

        Raises:
            RenderContainerMissingError: selector matches nothing
            RenderSizingError: element has no positive size
        """
        ...


class Rasterizer(Protocol):
    """Factory of per-request sessions"""

    def session(self, scale: float = 2.0) -> AsyncContextManager[RasterSession]:
        ...


class PlaywrightSession:
    """RasterSession over a Playwright page"""

    def __init__(self, page: Page, load_timeout_ms: int = PAGE_LOAD_TIMEOUT_MS):
        self.page = page
        self.load_timeout_ms = load_timeout_ms

    async def load_markup(self, html: str) -> None:
        try:
            await self.page.set_content(
                html, wait_until="domcontentloaded", timeout=self.load_timeout_ms
            )
        except PlaywrightError as e:
            raise RasterizerError(f"Failed to load formula page: {e}") from e

    async def capture_element(self, selector: str, omit_background: bool = False) -> bytes:
        element = await self.page.query_selector(selector)
        if element is None:
            raise RenderContainerMissingError(f"Render container '{selector}' not found")

        # Cropping to the element directly avoids rounding gaps of a manual clip
        box = await element.bounding_box()
        if not box or box["width"] <= 0 or box["height"] <= 0:
            raise RenderSizingError(f"Render container '{selector}' has no size: {box}")

        try:
            return await element.screenshot(type="png", omit_background=omit_background)
        except PlaywrightError as e:
            raise RasterizerError(f"Screenshot failed: {e}") from e


class PlaywrightRasterizer:
    """Launches a fresh Chromium per session"""

    def __init__(
        self,
        browser_args: Optional[List[str]] = None,
        viewport_width: int = VIEWPORT_WIDTH,
        viewport_height: int = VIEWPORT_HEIGHT,
        load_timeout_ms: int = PAGE_LOAD_TIMEOUT_MS,
    ):
        self.browser_args = list(BROWSER_ARGS if browser_args is None else browser_args)
        self.viewport_width = viewport_width
        self.viewport_height = viewport_height
        self.load_timeout_ms = load_timeout_ms

    @classmethod
    def from_settings(cls, settings) -> "PlaywrightRasterizer":
        return cls(
            browser_args=settings.browser_args,
            viewport_width=settings.viewport_width,
            viewport_height=settings.viewport_height,
            load_timeout_ms=settings.page_load_timeout_ms,
        )

    @asynccontextmanager
    async def session(self, scale: float = 2.0) -> AsyncIterator[PlaywrightSession]:
        try:
            playwright = await async_playwright().start()
        except PlaywrightError as e:
            raise RasterizerError(f"Failed to start Playwright: {e}") from e

        browser = None
        try:
            try:
                browser = await playwright.chromium.launch(headless=True, args=self.browser_args)
                page = await browser.new_page(
                    viewport={"width": self.viewport_width, "height": self.viewport_height},
                    device_scale_factor=scale,
                )
            except PlaywrightError as e:
                raise RasterizerError(f"Failed to launch browser: {e}") from e

            logger.debug(f"Raster session opened (scale={scale})")
            yield PlaywrightSession(page, self.load_timeout_ms)
        except BaseException:
            # The body's error wins; teardown problems are only logged
            await self._close(playwright, browser, strict=False)
            raise
        await self._close(playwright, browser, strict=True)

    @staticmethod
    async def _close(playwright, browser, strict: bool) -> None:
        """Close the browser, then always stop Playwright"""
        errors = []
        try:
            if browser is not None:
                await browser.close()
        except PlaywrightError as e:
            errors.append(e)
        finally:
            try:
                await playwright.stop()
            except PlaywrightError as e:
                errors.append(e)
        logger.debug("Raster session closed")

        if not errors:
            return
        if strict:
            raise RasterizerError(f"Failed to close browser session: {errors[0]}") from errors[0]
        for error in errors:
            logger.warning(f"Raster session teardown failed: {error}")
