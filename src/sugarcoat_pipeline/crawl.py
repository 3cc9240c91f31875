"""Run the PageGraph crawl engine to record browsing graphs for one URL."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from pydantic import ValidationError

from sugarcoat_pipeline.errors import CrawlError, CrawlValidationError, EmptyCrawlError
from sugarcoat_pipeline.models import CrawlArgs
from sugarcoat_pipeline.utils import list_files

log = logging.getLogger(__name__)


def validate_crawl_args(
    *,
    binary: Path,
    url: str,
    seconds: int,
    output: Path,
    debug: str = "none",
    filter_list: Path | None = None,
) -> CrawlArgs:
    """Check the parameter set before anything is launched."""
    try:
        return CrawlArgs(
            binary=binary,
            urls=[url],
            seconds=seconds,
            output=output,
            debug=debug,
            filter_list=filter_list,
        )
    except ValidationError as e:
        raise CrawlValidationError(str(e)) from e


def crawl_command(crawler: list[str], args: CrawlArgs) -> list[str]:
    cmd = list(crawler)
    cmd += ["-b", str(args.binary)]
    for url in args.urls:
        cmd += ["-u", url]
    cmd += ["-t", str(args.seconds), "-o", str(args.output), "--debug", args.debug]
    return cmd


def generate_graphs(crawler: list[str], args: CrawlArgs) -> list[Path]:
    """Crawl and block until the crawler exits (dwell time included).

    Returns:
        Graph files found in ``args.output``, sorted by name.

    Raises:
        CrawlError: the crawler could not be started or exited nonzero.
        EmptyCrawlError: the crawler left no files in the output directory.
    """
    log.debug("Generating graph files for URLs...")
    cmd = crawl_command(crawler, args)
    log.debug("Crawl command: %s", cmd)

    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, encoding="utf-8", errors="replace",
        )
    except OSError as e:
        raise CrawlError(f"could not run crawler {crawler[0]!r}: {e}") from e
    if result.returncode != 0:
        raise CrawlError(
            f"crawler exited with status {result.returncode}: {result.stderr.strip()}"
        )

    graph_files = list_files(args.output)
    if not graph_files:
        raise EmptyCrawlError(f"no graph files were written to {args.output}")
    log.debug("Done generating graph files! %d file(s)", len(graph_files))
    return graph_files
