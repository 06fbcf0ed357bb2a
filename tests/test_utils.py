import os
import re
import stat
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

from data_uri_converter.utils import (
    atomic_write,
    default_output_path,
    output_timestamp,
    sanitize_title,
)


def test_sanitize_title_replaces_invalid_characters() -> None:
    assert sanitize_title("Report: 2024/Q3") == "Report_ 2024_Q3"
    assert sanitize_title('a<b>"c"') == "a_b__c_"
    assert sanitize_title("plain title") == "plain title"


def test_sanitize_title_empty() -> None:
    assert sanitize_title("") == ""
    assert sanitize_title(None) == ""


def test_output_timestamp_is_filesystem_safe() -> None:
    stamp = output_timestamp(datetime(2024, 5, 6, 7, 8, 9, 123456, tzinfo=timezone.utc))
    assert ":" not in stamp
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{12}[+-]\d{4}", stamp)


def test_default_output_path(tmp_path: Path) -> None:
    now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    path = default_output_path("Title", tmp_path, now)
    assert path.parent == tmp_path.resolve()
    assert path.name == f"{output_timestamp(now)} Title.html"


def test_atomic_write_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "out.html"
    atomic_write(target, "<html></html>")
    assert target.read_text(encoding="utf-8") == "<html></html>"
    assert [p.name for p in target.parent.iterdir()] == ["out.html"]


def test_atomic_write_removes_temp_file_on_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "out.html"
    target.write_text("old", encoding="utf-8")

    def fail(src: str, dst: str) -> None:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(os, "replace", fail)
    with pytest.raises(OSError):
        atomic_write(target, "<html></html>")

    assert [p.name for p in tmp_path.iterdir()] == ["out.html"]
    assert target.read_text(encoding="utf-8") == "old"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_atomic_write_new_file_follows_umask(tmp_path: Path) -> None:
    target = tmp_path / "out.html"
    previous = os.umask(0o022)
    try:
        atomic_write(target, "<html></html>")
    finally:
        os.umask(previous)
    assert stat.S_IMODE(target.stat().st_mode) == 0o644


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_atomic_write_keeps_existing_mode(tmp_path: Path) -> None:
    target = tmp_path / "out.html"
    target.write_text("old", encoding="utf-8")
    target.chmod(0o640)
    atomic_write(target, "new")
    assert stat.S_IMODE(target.stat().st_mode) == 0o640
    assert target.read_text(encoding="utf-8") == "new"
