from __future__ import annotations

import os
import re
import stat
import tempfile
from datetime import datetime
from pathlib import Path


# Characters rejected in file names on at least one major platform.
INVALID_FILENAME_RE = re.compile(r'[\x00-\x1f"<>|:*?\\/]')
TIMESTAMP_FORMAT = "%Y-%m-%dT%H%M%S%f%z"


def sanitize_title(title: str | None) -> str:
    if not title:
        return ""
    return "_".join(INVALID_FILENAME_RE.split(title))


def output_timestamp(now: datetime | None = None) -> str:
    moment = (now or datetime.now()).astimezone()
    return moment.strftime(TIMESTAMP_FORMAT)


def default_output_path(title: str, directory: Path, now: datetime | None = None) -> Path:
    return (directory / f"{output_timestamp(now)} {title}.html").resolve()


def _output_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def atomic_write(path: Path, data: str, encoding: str = "utf-8") -> None:
    """Replace ``path`` in one step; the target is never left half written.

    A new file gets the usual umask-derived mode, an existing one keeps its
    mode. The temporary file is removed if anything fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _output_mode(path)
    tmp = tempfile.NamedTemporaryFile(
        "w", delete=False, dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", encoding=encoding
    )
    tmp_path = Path(tmp.name)
    try:
        with tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
