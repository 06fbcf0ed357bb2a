from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, TypeVar
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Comment, Tag

from .config import AppConfig
from .datauri import encode_image, to_data_uri
from .detection import sniff_media_type
from .errors import ConversionTimeout, ResourceIOError
from .fetcher import ResourceFetcher, is_local, resolve_location, uri_extension, uri_stem
from .models import HtmlConversionResult, ImageReference
from .rendering import PlaywrightScriptEngine, ScriptEngine
from .utils import atomic_write, default_output_path, sanitize_title

logger = logging.getLogger(__name__)

IMAGE_SELECTOR = "img, embed"
T = TypeVar("T")


def parse_document(markup: str | bytes, charset: str | None = None) -> tuple[BeautifulSoup, Tag]:
    """Parse a document, synthesizing an empty root for blank input.

    Bytes are decoded by BeautifulSoup, which honours a BOM and any
    declared charset; ``charset`` from the transport takes precedence.
    """
    soup = BeautifulSoup(markup, "lxml", from_encoding=charset if isinstance(markup, bytes) else None)
    root = soup.find("html")
    if not isinstance(root, Tag):
        root = soup.new_tag("html")
        root.append(soup.new_tag("body"))
        soup.append(root)
    return soup, root


def resolve_title(soup: BeautifulSoup, uri: str) -> str:
    """First non-empty of ``<title>``, ``og:title`` and the location's file stem."""
    title_element = soup.select_one("head > title")
    og_title = soup.select_one('head > meta[property="og:title"]')
    candidates = (
        title_element.get_text() if title_element is not None else "",
        str(og_title.get("content") or "") if og_title is not None else "",
        uri_stem(uri),
    )
    return next((candidate.strip() for candidate in candidates if candidate.strip()), "")


def ensure_title_element(soup: BeautifulSoup, root: Tag, title: str) -> None:
    if not title:
        return
    title_element = soup.select_one("head > title")
    if title_element is not None and title_element.get_text().strip():
        return
    if title_element is None:
        head = soup.select_one("head")
        if head is None:
            head = soup.new_tag("head")
            root.insert(0, head)
        title_element = soup.new_tag("title")
        head.insert(0, title_element)
    title_element.string = title


def effective_source(element: Tag) -> str:
    src = str(element.get("src") or "").strip()
    if src:
        return src
    return str(element.get("data-src") or "").strip()


def collect_references(soup: BeautifulSoup) -> list[ImageReference]:
    references: list[ImageReference] = []
    for element in soup.select(IMAGE_SELECTOR):
        source = effective_source(element)
        if not source or source[:5].lower() == "data:":
            continue
        references.append(ImageReference(element=element, source=source))
    return references


def build_fetch_plan(references: list[ImageReference]) -> list[str]:
    """Distinct sources in document order; each is fetched once."""
    return list(dict.fromkeys(reference.source for reference in references))


def document_base_uri(soup: BeautifulSoup, uri: str) -> str:
    base = soup.select_one("base[href]")
    if base is not None:
        href = str(base.get("href") or "").strip()
        if href:
            return urljoin(uri, href)
    return uri


def add_provenance_comment(root: Tag, uri: str) -> None:
    root.insert(0, Comment(f" OriginalSrc: {uri} "))


class ConversionService:
    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        script_engine: ScriptEngine | None = None,
    ) -> None:
        self._config = config or AppConfig()
        self._transport = transport
        self._script_engine = script_engine

    async def convert_image(self, location: str) -> str:
        return await self._with_deadline(self._convert_image(location), location)

    async def convert_html(
        self, location: str, *, use_script_engine: bool = False
    ) -> HtmlConversionResult:
        return await self._with_deadline(
            self._convert_html(location, use_script_engine), location
        )

    async def write_html(self, result: HtmlConversionResult, output: Path | None = None) -> Path:
        path = output or default_output_path(result.title, self._config.runtime.output_dir)
        try:
            await asyncio.to_thread(atomic_write, path, result.html)
        except OSError as exc:
            raise ResourceIOError(f"Cannot write {path}: {exc.strerror or exc}") from exc
        return path

    def _fetcher(self) -> ResourceFetcher:
        return ResourceFetcher(self._config.http, transport=self._transport)

    async def _with_deadline(self, awaitable: Awaitable[T], location: str) -> T:
        timeout = self._config.runtime.convert_timeout_s
        if timeout <= 0:
            return await awaitable
        try:
            return await asyncio.wait_for(awaitable, timeout)
        except TimeoutError as exc:
            raise ConversionTimeout(f"Conversion exceeded {timeout:g}s for {location}") from exc

    async def _convert_image(self, location: str) -> str:
        uri = resolve_location(location)
        async with self._fetcher() as fetcher:
            data = await fetcher.fetch_bytes(uri)
        return encode_image(data, uri_extension(uri))

    async def _convert_html(self, location: str, use_script_engine: bool) -> HtmlConversionResult:
        uri = resolve_location(location)
        async with self._fetcher() as fetcher:
            if use_script_engine:
                soup, root = parse_document(await self._render(uri))
            else:
                data, charset = await fetcher.fetch_document(uri)
                soup, root = parse_document(data, charset)

            title = resolve_title(soup, uri)
            ensure_title_element(soup, root, title)

            references = collect_references(soup)
            plan = build_fetch_plan(references)
            results = await self._inline_sources(fetcher, plan, document_base_uri(soup, uri))

        for reference in references:
            reference.element["src"] = results[reference.source]

        if not is_local(uri):
            add_provenance_comment(root, uri)

        inlined = [source for source in plan if results[source] != source]
        kept = [source for source in plan if results[source] == source]
        logger.info("inlined %d of %d image sources", len(inlined), len(plan))
        return HtmlConversionResult(
            html=str(root),
            title=sanitize_title(title),
            inlined=inlined,
            kept=kept,
        )

    async def _render(self, uri: str) -> str:
        engine = self._script_engine or PlaywrightScriptEngine(self._config.render)
        async with engine.open(uri) as page:
            total = await page.count(IMAGE_SELECTOR)
            for index in range(total):
                try:
                    await page.scroll_into_view(IMAGE_SELECTOR, index)
                except Exception as exc:
                    logger.info(
                        "failed to scroll element into view. element: %s[%d] (%s)",
                        IMAGE_SELECTOR,
                        index,
                        exc,
                    )
            return await page.content()

    async def _inline_sources(
        self, fetcher: ResourceFetcher, plan: list[str], base_uri: str
    ) -> dict[str, str]:
        pairs = await asyncio.gather(
            *(self._inline_source(fetcher, source, base_uri) for source in plan)
        )
        return dict(pairs)

    async def _inline_source(
        self, fetcher: ResourceFetcher, source: str, base_uri: str
    ) -> tuple[str, str]:
        try:
            uri = urljoin(base_uri, source)
            data = await fetcher.fetch_bytes(uri)
        except Exception as exc:
            logger.info("failed to get content. src: %s (%s)", source, exc)
            return source, source

        media_type = sniff_media_type(uri_extension(uri), data)
        if not media_type.is_known:
            logger.info("not supported media type. src: %s", source)
            return source, source
        return source, to_data_uri(media_type, data)


__all__ = [
    "ConversionService",
    "add_provenance_comment",
    "build_fetch_plan",
    "collect_references",
    "document_base_uri",
    "effective_source",
    "parse_document",
    "ensure_title_element",
    "resolve_title",
]
