"""Graph queries: matched edges -> downstream requests -> script sources on disk."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from sugarcoat_pipeline.errors import QueryCommandError
from sugarcoat_pipeline.models import ExtractedScript
from sugarcoat_pipeline.pagegraph import PageGraphCLI
from sugarcoat_pipeline.utils import SCRIPT_EXT, unique_script_name

log = logging.getLogger(__name__)


@dataclass
class ExtractionContext:
    """Per-run state shared by the extractor and the config assembler."""
    output_dir: Path
    name_to_url: dict[str, str] = field(default_factory=dict)
    scripts: list[ExtractedScript] = field(default_factory=list)


def matched_edges(engine: PageGraphCLI, filter_list: Path | None) -> list[str]:
    """Edge ids of every request matching the filter list, in engine order."""
    edges = [
        str(pair[1])
        for record in engine.adblock_rules(filter_list)
        for pair in record.requests
    ]
    log.debug("Matched edges in %s: %s", engine.graph_file.name, edges)
    return edges


def downstream_requests(engine: PageGraphCLI, edges: list[str]) -> list[str]:
    """Request ids causally downstream of each edge, flattened; duplicates kept."""
    requests: list[str] = []
    for edge in edges:
        requests.extend(engine.downstream_requests(edge))
    log.debug("Downstream requests in %s: %s", engine.graph_file.name, requests)
    return requests


def extract_sources(
    engine: PageGraphCLI,
    request_ids: list[str],
    ctx: ExtractionContext,
) -> list[ExtractedScript]:
    """Write the source of every script request into ``ctx.output_dir``.

    Requests the engine rejects are not scripts and are skipped. Each write
    completes before the next query is issued.
    """
    written: list[ExtractedScript] = []
    for request_id in request_ids:
        try:
            info = engine.request_id_info(request_id)
        except QueryCommandError:
            log.debug("Request %s is not a script, skipping", request_id)
            continue

        name = unique_script_name(info.url)
        path = ctx.output_dir / f"{name}{SCRIPT_EXT}"
        path.write_text(info.source, encoding="utf-8")

        ctx.name_to_url[name] = info.url
        script = ExtractedScript(
            name=name, source_url=info.url, source_text=info.source, path=path,
        )
        ctx.scripts.append(script)
        written.append(script)
        log.debug("Wrote %s (%s)", path.name, info.url)
    return written


def extract_graph(
    engine: PageGraphCLI,
    filter_list: Path | None,
    ctx: ExtractionContext,
) -> list[ExtractedScript]:
    """Run the full query chain against one graph file."""
    edges = matched_edges(engine, filter_list)
    requests = downstream_requests(engine, edges)
    return extract_sources(engine, requests, ctx)
