from pathlib import Path

from data_uri_converter.config import AppConfig, load_config


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.toml")
    assert config == AppConfig()
    assert config.render.viewport_width == 1080
    assert config.render.viewport_height == 1920


def test_load_config_overrides(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        "[http]\ntimeout_s = 5\nfollow_redirects = false\n"
        "[runtime]\noutput_dir = \"exports\"\nconvert_timeout_s = 60\nenable_local_api = true\n"
        "[api]\nport = 9000\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.http.timeout_s == 5.0
    assert config.http.follow_redirects is False
    assert config.runtime.output_dir == Path("exports")
    assert config.runtime.convert_timeout_s == 60.0
    assert config.runtime.enable_local_api is True
    assert config.api.port == 9000
    assert config.render.wait_until == "load"
