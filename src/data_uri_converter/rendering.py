"""Optional in-page script execution.

The HTML converter only needs three things from a live page: how many
elements match a selector, a way to scroll one of them into view (which
fires lazy-loading handlers), and the resulting markup. Any engine offering
those can be injected; Playwright is the bundled one.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, AsyncIterator, Protocol

from .config import RenderConfig
from .errors import ScriptEngineUnavailable


class ScriptPage(Protocol):
    async def count(self, selector: str) -> int:  # pragma: no cover - interface
        ...

    async def scroll_into_view(self, selector: str, index: int) -> None:  # pragma: no cover - interface
        ...

    async def content(self) -> str:  # pragma: no cover - interface
        ...


class ScriptEngine(Protocol):
    def open(self, uri: str) -> AbstractAsyncContextManager[ScriptPage]:  # pragma: no cover - interface
        ...


class PlaywrightPage:
    def __init__(self, page: Any, timeout_ms: int) -> None:
        self._page = page
        self._timeout_ms = timeout_ms

    async def count(self, selector: str) -> int:
        return await self._page.locator(selector).count()

    async def scroll_into_view(self, selector: str, index: int) -> None:
        element = self._page.locator(selector).nth(index)
        await element.scroll_into_view_if_needed(timeout=self._timeout_ms)

    async def content(self) -> str:
        return await self._page.content()


class PlaywrightScriptEngine:
    """Headless Chromium with scripts, styles and network loading enabled."""

    def __init__(self, config: RenderConfig | None = None) -> None:
        try:
            from playwright.async_api import async_playwright
        except ModuleNotFoundError as exc:  # pragma: no cover - import guard
            raise ScriptEngineUnavailable(
                "playwright is required to run page scripts; install data-uri-converter[js] "
                "and run 'playwright install chromium'"
            ) from exc

        self._async_playwright = async_playwright
        self._config = config or RenderConfig()

    @asynccontextmanager
    async def open(self, uri: str) -> AsyncIterator[ScriptPage]:
        config = self._config
        async with self._async_playwright() as playwright:
            browser = await playwright.chromium.launch()
            try:
                page = await browser.new_page(
                    viewport={"width": config.viewport_width, "height": config.viewport_height},
                    java_script_enabled=True,
                )
                await page.goto(uri, wait_until=config.wait_until, timeout=config.timeout_ms)
                yield PlaywrightPage(page, config.timeout_ms)
            finally:
                await browser.close()


__all__ = ["PlaywrightScriptEngine", "ScriptEngine", "ScriptPage"]
