from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping


CONFIG_FILE = Path("config.toml")
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; data-uri-converter/0.1.0)"


@dataclass(slots=True)
class HttpConfig:
    timeout_s: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True


@dataclass(slots=True)
class RenderConfig:
    viewport_width: int = 1080
    viewport_height: int = 1920
    wait_until: str = "load"
    timeout_ms: int = 30_000


@dataclass(slots=True)
class RuntimeConfig:
    output_dir: Path = Path(".")
    convert_timeout_s: float = 0.0
    enable_local_api: bool = False


@dataclass(slots=True)
class APIConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass(slots=True)
class AppConfig:
    http: HttpConfig = field(default_factory=HttpConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    api: APIConfig = field(default_factory=APIConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _section(raw: Mapping[str, object], name: str) -> Mapping[str, object] | None:
    data = raw.get(name)
    return data if isinstance(data, Mapping) else None


def _build_http(data: Mapping[str, object] | None) -> HttpConfig:
    if not data:
        return HttpConfig()
    return HttpConfig(
        timeout_s=float(data.get("timeout_s", 30.0)),
        user_agent=str(data.get("user_agent", DEFAULT_USER_AGENT)),
        follow_redirects=bool(data.get("follow_redirects", True)),
    )


def _build_render(data: Mapping[str, object] | None) -> RenderConfig:
    if not data:
        return RenderConfig()
    return RenderConfig(
        viewport_width=int(data.get("viewport_width", 1080)),
        viewport_height=int(data.get("viewport_height", 1920)),
        wait_until=str(data.get("wait_until", "load")),
        timeout_ms=int(data.get("timeout_ms", 30_000)),
    )


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    return RuntimeConfig(
        output_dir=Path(str(data.get("output_dir", "."))),
        convert_timeout_s=float(data.get("convert_timeout_s", 0.0)),
        enable_local_api=bool(data.get("enable_local_api", False)),
    )


def _build_api(data: Mapping[str, object] | None) -> APIConfig:
    if not data:
        return APIConfig()
    return APIConfig(host=str(data.get("host", "127.0.0.1")), port=int(data.get("port", 8000)))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or CONFIG_FILE
    raw = _read_toml(path)
    return AppConfig(
        http=_build_http(_section(raw, "http")),
        render=_build_render(_section(raw, "render")),
        runtime=_build_runtime(_section(raw, "runtime")),
        api=_build_api(_section(raw, "api")),
    )


__all__ = [
    "APIConfig",
    "AppConfig",
    "HttpConfig",
    "RenderConfig",
    "RuntimeConfig",
    "load_config",
]
