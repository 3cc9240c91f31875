"""Shared utilities for sugarcoat-pipeline."""

from __future__ import annotations

import posixpath
import shlex
import uuid
from pathlib import Path

SCRIPT_EXT = ".js"

# File names are limited to 255 bytes; leave room for "-<uuid4>.js".
MAX_BASENAME_BYTES = 200


def split_command(cmd: str) -> list[str]:
    """Split a tool command into an argument list (POSIX word rules, no shell)."""
    args = shlex.split(cmd)
    if not args:
        raise ValueError("empty command")
    return args


def list_files(directory: Path) -> list[Path]:
    """Regular files directly inside directory, sorted by name."""
    return sorted(p for p in directory.iterdir() if p.is_file())


def script_basename(url: str) -> str:
    """Last path segment of url with the script extension removed.

    Trailing slashes are ignored, so ``http://cdn.example/`` gives ``cdn.example``.
    Long basenames (e.g. the tail of a data: URL) are cut to MAX_BASENAME_BYTES.
    """
    base = posixpath.basename(url.rstrip("/"))
    if base.endswith(SCRIPT_EXT) and base != SCRIPT_EXT:
        base = base[: -len(SCRIPT_EXT)]
    encoded = base.encode("utf-8")
    if len(encoded) > MAX_BASENAME_BYTES:
        base = encoded[:MAX_BASENAME_BYTES].decode("utf-8", errors="ignore")
    return base


def unique_script_name(url: str) -> str:
    return f"{script_basename(url)}-{uuid.uuid4()}"


def script_stem(filename: str) -> str:
    """Target key for a file in the output directory."""
    if filename.endswith(SCRIPT_EXT):
        return filename[: -len(SCRIPT_EXT)]
    return filename
