"""File helpers for settings files and finished G-code programs.

Writes go to a sibling ``.part`` file which is flushed, fsynced and then
renamed over the target, so a controller watching a spool directory never
picks up a half-written program.  YAML goes through PyYAML's safe loader and
dumper only.

Usage::

    from svg_motion.utils import fs
    data = fs.load_yaml("plotter.yaml")
    fs.atomic_yaml_dump(data, "backup/plotter.yaml")
    fs.write_program("out/logo.gcode", lines)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Iterable

import yaml

PathLike = str | Path


def ensure_dir(directory: PathLike) -> Path:
    """Create *directory* (and parents) if missing; return it as a Path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def atomic_write_bytes(target: PathLike, payload: bytes, suffix: str = ".part") -> None:
    """Replace *target* with *payload* in one rename.

    Raises
    ------
    RuntimeError
        If the staging file cannot be written or renamed.  The staging file
        is removed before raising.
    """
    target = Path(target)
    ensure_dir(target.parent)
    staging = target.with_name(target.name + suffix)

    try:
        with staging.open("wb") as fh:
            fh.write(payload)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(staging, target)
    except OSError as exc:
        staging.unlink(missing_ok=True)
        raise RuntimeError(f"Could not write {target}: {exc}") from exc


def atomic_write_text(target: PathLike, text: str, encoding: str = "utf-8") -> None:
    atomic_write_bytes(target, text.encode(encoding))


def write_program(target: PathLike, lines: Iterable[str]) -> None:
    """Write G-code *lines* newline-terminated, atomically."""
    atomic_write_text(target, "".join(f"{line}\n" for line in lines))


def atomic_yaml_dump(data: Any, target: PathLike) -> None:
    """Dump *data* as block-style YAML, keeping mapping order."""
    text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
    atomic_write_text(target, text)


def load_yaml(source: PathLike) -> Any:
    """Parse a YAML file with ``yaml.safe_load``.

    Returns ``None`` for an empty file.

    Raises
    ------
    FileNotFoundError
        If *source* does not exist.
    yaml.YAMLError
        If the file is not valid YAML; the message names the file.
    """
    source = Path(source)
    if not source.is_file():
        raise FileNotFoundError(f"YAML file not found: {source}")
    text = source.read_text(encoding="utf-8")
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise yaml.YAMLError(f"{source}: {exc}") from exc
