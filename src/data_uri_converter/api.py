from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI, File, HTTPException, UploadFile
from pydantic import BaseModel

from .config import AppConfig, load_config
from .core import ConversionService
from .datauri import to_data_uri
from .detection import sniff_media_type
from .errors import ConversionError, ScriptEngineUnavailable
from .settings import get_settings


class ImageRequest(BaseModel):
    input: str


class HtmlRequest(BaseModel):
    input: str
    js: bool = False


class ImageResponse(BaseModel):
    data_uri: str
    media_type: str | None = None


class HtmlResponse(BaseModel):
    title: str
    html: str
    inlined: list[str]
    kept: list[str]


def _prepare_config(config_path: Path | None) -> AppConfig:
    settings = get_settings()
    config = load_config(config_path or settings.config_path)
    if settings.enable_local_api is not None:
        config.runtime.enable_local_api = settings.enable_local_api
    return config


def create_app(
    config_path: Path | None = None,
    *,
    require_enabled: bool = True,
    service: ConversionService | None = None,
) -> FastAPI:
    config = _prepare_config(config_path)
    if require_enabled and not config.runtime.enable_local_api:
        raise RuntimeError("Local API is disabled. Enable it via config.runtime.enable_local_api")
    service = service or ConversionService(config)
    app = FastAPI(title="Data URI Converter", version="0.1.0")

    @app.get("/health", summary="Health check")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/image", summary="Convert an uploaded image")
    async def convert_upload(file: UploadFile = File(...)) -> ImageResponse:
        content = await file.read()
        media_type = sniff_media_type(Path(file.filename or "upload").suffix, content)
        return ImageResponse(data_uri=to_data_uri(media_type, content), media_type=media_type.value)

    @app.post("/image/url", summary="Convert an image by path or URL")
    async def convert_image(request: ImageRequest) -> ImageResponse:
        """Read an image from a URL or from any path this process can read.

        Local paths are resolved on the server host, so only expose the API
        on a trusted interface.
        """
        try:
            data_uri = await service.convert_image(request.input)
        except ConversionError as exc:
            raise HTTPException(status_code=400, detail=exc.code) from exc
        return ImageResponse(data_uri=data_uri)

    @app.post("/html", summary="Inline every image of an HTML document")
    async def convert_html(request: HtmlRequest) -> HtmlResponse:
        try:
            result = await service.convert_html(request.input, use_script_engine=request.js)
        except ScriptEngineUnavailable as exc:
            raise HTTPException(status_code=501, detail=str(exc)) from exc
        except ConversionError as exc:
            raise HTTPException(status_code=400, detail=exc.code) from exc
        return HtmlResponse(title=result.title, html=result.html, inlined=result.inlined, kept=result.kept)

    return app


def create_asgi_app(config_path: Path | None = None) -> FastAPI:
    """The app an ASGI server should load; answers 503 while the API is disabled."""
    if _prepare_config(config_path).runtime.enable_local_api:
        return create_app(config_path)

    app = FastAPI(title="Data URI Converter", version="0.1.0")

    @app.get("/")
    async def api_disabled() -> dict[str, str]:
        raise HTTPException(
            status_code=503,
            detail="Local API disabled. Set enable_local_api = true under [runtime] in config.toml",
        )

    return app


__all__ = ["create_app", "create_asgi_app"]
