"""Invoke the SugarCoat rewrite engine on the assembled config."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from sugarcoat_pipeline.errors import RewriteError

log = logging.getLogger(__name__)

REWRITE_FLAGS = ["--ingest", "--report", "--rewrite", "--bundle"]


def sugarcoat_command(sugarcoat: list[str], config_path: Path) -> list[str]:
    return [*sugarcoat, "--config", str(config_path), *REWRITE_FLAGS]


def run_sugarcoat(sugarcoat: list[str], config_path: Path) -> None:
    """Run ingest, rewrite, bundle and report in one blocking call. No retries."""
    cmd = sugarcoat_command(sugarcoat, config_path)
    log.debug("Running sugarcoat: %s", cmd)
    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, encoding="utf-8", errors="replace",
        )
    except OSError as e:
        raise RewriteError(f"could not run {sugarcoat[0]!r}: {e}") from e
    if result.returncode != 0:
        raise RewriteError(
            f"sugarcoat exited with status {result.returncode}: {result.stderr.strip()}"
        )
    log.debug("Sugarcoat command finished running!")
