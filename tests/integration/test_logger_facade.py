from __future__ import annotations

"""
Integration tests for the Logger Facade.

Exercises the full pipeline (gate -> formatter -> console/file sink ->
archiver) against a temporary directory, including the documented
end-to-end scenarios: a single WARN record landing in errors.log, and a
burst of ALERT records forcing rotation and archiving at 1 MB.
"""

import io
import re
import zipfile
from pathlib import Path
from typing import Callable, List
from unittest.mock import patch

import pytest

from systemlog import (
    Level,
    Logger,
    LoggerNotInitializedError,
    create_logger,
    get_default_logger,
)
from systemlog.domain.config import LoggerConfig
from systemlog.domain.errors import ArchiveError
from systemlog.domain.levels import COLORS
from systemlog.infra.archiver import Archiver

WARN_LINE_RE = re.compile(r"^\d{4}\.\d{2}\.\d{2}_\d{2}:\d{2}:\d{2} .*WARN.* count=42$")


def _lines(stream: io.StringIO) -> List[str]:
    return stream.getvalue().splitlines()


# -----------------------------------------------------------------------------
# DOCUMENTED SCENARIOS
# -----------------------------------------------------------------------------

def test_warning_reaches_console_and_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """TC-01: create_logger("errors", "", 4, 1) then warning("count=%d", 42)."""
    monkeypatch.chdir(tmp_path)
    console = io.StringIO()

    log = create_logger("errors", "", 4, 1, stream=console)
    log.warning("count=%d", 42)
    log.close()

    lines = _lines(console)
    assert len(lines) == 1
    assert WARN_LINE_RE.match(lines[0])
    assert "test_logger_facade.py:" in lines[0]

    persisted = (tmp_path / "errors.log").read_text(encoding="utf-8").splitlines()
    assert persisted == lines


def test_alert_burst_rotates_and_archives(tmp_path: Path) -> None:
    """TC-02: ALERT records past 1 MB trigger rotation and a zip archive."""
    console = io.StringIO()
    log = create_logger("errors", str(tmp_path), 4, 1, stream=console)

    written = 0
    i = 0
    while written <= 1_100_000:
        log.alert("x%d", i)
        written = console.tell()
        i += 1

    assert log.flush(timeout=10)
    log.close()

    assert log.sink.rotations >= 1
    assert (tmp_path / "errors_bkp.log.zip").exists()
    assert not (tmp_path / "errors_bkp.log").exists()
    assert (tmp_path / "errors.log").stat().st_size < 1_000_000
    assert any("archived log to" in line and "errors_bkp.log.zip" in line for line in _lines(console))

    with zipfile.ZipFile(tmp_path / "errors_bkp.log.zip") as zf:
        assert zf.namelist() == ["errors_bkp.log"]
        archived = zf.read("errors_bkp.log")
    assert len(archived) > 1_000_000


# -----------------------------------------------------------------------------
# SEVERITY GATING
# -----------------------------------------------------------------------------

@pytest.mark.parametrize("configured", [1, 2, 3, 4])
def test_console_emission_follows_level(make_logger: Callable[..., Logger], console: io.StringIO,
                                        configured: int) -> None:
    log = make_logger(level=configured)
    emitted = []
    for level in Level:
        before = len(_lines(console))
        getattr(log, level.name.lower())("probe")
        if len(_lines(console)) > before:
            emitted.append(level)

    assert emitted == [lvl for lvl in Level if lvl <= configured or lvl is Level.ALERT]


def test_print_is_untagged_and_not_persisted(make_logger: Callable[..., Logger], console: io.StringIO,
                                             tmp_path: Path) -> None:
    log = make_logger(persist_all=True)
    log.print("plain %s", "text")

    line = _lines(console)[0]
    assert line.endswith("\tplain text")
    assert not (tmp_path / "errors.log").exists()


def test_print_suppressed_below_debug(make_logger: Callable[..., Logger], console: io.StringIO) -> None:
    make_logger(level=3).print("hidden")
    assert console.getvalue() == ""


def test_info_and_debug_stay_off_disk_by_default(make_logger: Callable[..., Logger], tmp_path: Path) -> None:
    log = make_logger()
    log.info("i")
    log.debug("d")
    log.warning("w")
    log.close()

    persisted = (tmp_path / "errors.log").read_text(encoding="utf-8").splitlines()
    assert [line.split("\t")[1].split(" ")[0] for line in persisted] == ["WARN"]


def test_persist_all_writes_every_level(make_logger: Callable[..., Logger], tmp_path: Path) -> None:
    log = make_logger(persist_all=True)
    log.debug("d")
    log.info("i")
    log.warning("w")
    log.alert("a")
    log.close()

    persisted = (tmp_path / "errors.log").read_text(encoding="utf-8").splitlines()
    assert [line.split("\t")[1].split(" ")[0] for line in persisted] == ["DEBUG", "INFO", "WARN", "ALERT"]


# -----------------------------------------------------------------------------
# PERSISTENCE MODES & FAILURES
# -----------------------------------------------------------------------------

def test_zero_size_creates_no_files(make_logger: Callable[..., Logger], console: io.StringIO,
                                    tmp_path: Path) -> None:
    """TC-03: Size 0 keeps everything on the console."""
    log = make_logger(size_mb=0, persist_all=True)
    for i in range(5000):
        log.alert("x%d", i)
    log.flush()

    assert len(_lines(console)) == 5000
    assert list(tmp_path.iterdir()) == []


def test_file_failure_does_not_stop_console(make_logger: Callable[..., Logger], console: io.StringIO,
                                            tmp_path: Path) -> None:
    """TC-04: Logging never raises; console output carries on."""
    (tmp_path / "errors.log").mkdir()
    log = make_logger()

    log.alert("still %s", "visible")

    assert _lines(console)[0].endswith("ALERT still visible")


def test_format_mismatch_does_not_raise(make_logger: Callable[..., Logger], console: io.StringIO) -> None:
    log = make_logger()
    log.warning("%d and %s", "nope")
    assert _lines(console)[0].endswith("WARN %!d(str=nope) and %!s(MISSING)")


def test_color_only_on_console(make_logger: Callable[..., Logger], console: io.StringIO, tmp_path: Path) -> None:
    log = make_logger(color=True)
    log.warning("tinted")
    log.close()

    assert COLORS["WARN"] in console.getvalue()
    assert COLORS["WARN"] not in (tmp_path / "errors.log").read_text(encoding="utf-8")


def test_quiet_logger_still_persists(make_logger: Callable[..., Logger], console: io.StringIO,
                                     tmp_path: Path) -> None:
    log = make_logger(console=False)
    log.alert("only on disk")
    log.close()

    assert console.getvalue() == ""
    assert "only on disk" in (tmp_path / "errors.log").read_text(encoding="utf-8")


def test_archive_failure_is_announced(make_logger: Callable[..., Logger], console: io.StringIO) -> None:
    """TC-05: A failed archive is only observable as an ALERT record."""
    log = make_logger()
    # Large enough that the announcing ALERT itself does not rotate again
    log.sink.threshold = 2_000
    error = ArchiveError("disk full", log.config.backup_path, "write archive")

    with patch.object(Archiver, "archive", side_effect=error):
        log.warning("%s", "r" * 2_500)
        assert log.flush(timeout=5)

    assert any("ALERT archive of" in line and "disk full" in line for line in _lines(console))


# -----------------------------------------------------------------------------
# LIFECYCLE
# -----------------------------------------------------------------------------

def test_create_logger_removes_stale_files(tmp_path: Path) -> None:
    for name in ("app.log", "app_bkp.log", "app_bkp.log.zip"):
        (tmp_path / name).write_text("old run")

    create_logger("app", str(tmp_path), 4, 1, stream=io.StringIO())

    assert list(tmp_path.iterdir()) == []


def test_default_logger_accessor(tmp_path: Path) -> None:
    with pytest.raises(LoggerNotInitializedError):
        get_default_logger()

    log = create_logger("", str(tmp_path), 2, 1, stream=io.StringIO())
    assert get_default_logger() is log
    assert log.config.name == "errors"
    assert log.config.level is Level.WARNING


def test_recreating_replaces_default(tmp_path: Path) -> None:
    first = create_logger("a", str(tmp_path), 4, 1, stream=io.StringIO())
    second = create_logger("b", str(tmp_path), 4, 1, stream=io.StringIO())
    assert get_default_logger() is second is not first


def test_close_stops_archiver_before_closing_file(make_logger: Callable[..., Logger]) -> None:
    """TC-06: Archive ALERTs raised while draining land before the file is closed."""
    log = make_logger()
    calls: List[str] = []

    with patch.object(log.archiver, "shutdown", side_effect=lambda wait=True: calls.append("archiver")), \
            patch.object(log.sink, "close", side_effect=lambda: calls.append("sink")):
        log.close()

    assert calls == ["archiver", "sink"]


def test_directly_built_config_uses_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
                                              console: io.StringIO) -> None:
    """TC-07: A Logger built from a bare LoggerConfig writes inside the directory."""
    monkeypatch.chdir(tmp_path)
    log = Logger(LoggerConfig(directory="logs", level=4), stream=console)  # type: ignore[arg-type]
    log.warning("hello")
    log.close()

    assert "hello" in (tmp_path / "logs" / "errors.log").read_text(encoding="utf-8")
    assert not (tmp_path / "logserrors.log").exists()
    assert "level=DEBUG" in repr(log)


# -----------------------------------------------------------------------------
# HOSTILE INPUT
# -----------------------------------------------------------------------------

def test_undecodable_text_is_persisted(make_logger: Callable[..., Logger], console: io.StringIO,
                                       tmp_path: Path) -> None:
    """TC-08: A lone surrogate in the message neither raises nor loses the record."""
    log = make_logger()
    log.warning("name=%s", "bad\udcffbyte")
    log.close()

    assert _lines(console)[0].endswith("WARN name=bad\udcffbyte")
    persisted = (tmp_path / "errors.log").read_text(encoding="utf-8")
    assert "WARN name=bad\\udcffbyte" in persisted


def test_broken_repr_does_not_raise(make_logger: Callable[..., Logger], console: io.StringIO) -> None:
    class NoRepr:
        def __repr__(self) -> str:
            raise RuntimeError("no repr")

    make_logger().warning("%r", NoRepr())
    assert _lines(console)[0].endswith("WARN %!r(PANIC=RuntimeError)")
