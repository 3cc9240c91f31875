"""Pipeline driver: workspace -> crawl -> graph queries -> config -> rewrite."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from sugarcoat_pipeline.config import assemble_config, load_policy, write_config
from sugarcoat_pipeline.crawl import generate_graphs, validate_crawl_args
from sugarcoat_pipeline.extract import ExtractionContext, extract_graph
from sugarcoat_pipeline.models import BuildConfig, ExtractedScript
from sugarcoat_pipeline.pagegraph import PageGraphCLI
from sugarcoat_pipeline.rewrite import run_sugarcoat
from sugarcoat_pipeline.workspace import StagingLayout, prepare_workspace

log = logging.getLogger(__name__)

DEFAULT_PAGEGRAPH_CLI = ["./pagegraph-cli"]
DEFAULT_CRAWLER = ["npm", "run", "crawl", "--"]
DEFAULT_SUGARCOAT = ["npm", "run", "sugarcoat", "--"]


@dataclass
class PipelineResult:
    layout: StagingLayout
    graph_files: list[Path]
    scripts: list[ExtractedScript]
    config: BuildConfig
    config_path: Path


@dataclass
class PipelineOptions:
    binary: Path
    url: str
    seconds: int = 30
    debug: str = "none"
    filter_list: Path | None = None
    policy_path: Path = Path("policy.json")
    gen_dir: Path = Path("gen")
    pagegraph_cli: list[str] = field(default_factory=lambda: list(DEFAULT_PAGEGRAPH_CLI))
    crawler: list[str] = field(default_factory=lambda: list(DEFAULT_CRAWLER))
    sugarcoat: list[str] = field(default_factory=lambda: list(DEFAULT_SUGARCOAT))


def run_pipeline(opts: PipelineOptions) -> PipelineResult:
    """Run every stage in order for one URL.

    Any PipelineError raised by a stage ends the run; the only tolerated
    failure is a request the query engine reports as unrelated to script
    content.
    """
    # Phase 1: Fresh workspace
    layout = prepare_workspace(opts.gen_dir, opts.policy_path)

    # Phase 2: Crawl
    crawl_args = validate_crawl_args(
        binary=opts.binary,
        url=opts.url,
        seconds=opts.seconds,
        output=layout.graphs_dir,
        debug=opts.debug,
        filter_list=opts.filter_list,
    )
    graph_files = generate_graphs(opts.crawler, crawl_args)
    log.info("Crawl produced %d graph file(s)", len(graph_files))

    # Phase 3: Graph queries and source extraction, one graph at a time
    ctx = ExtractionContext(output_dir=layout.output_dir)
    log.debug("Getting sources")
    for graph_file in graph_files:
        engine = PageGraphCLI(opts.pagegraph_cli, graph_file)
        written = extract_graph(engine, opts.filter_list, ctx)
        log.info("%s: extracted %d script(s)", graph_file.name, len(written))

    # Phase 4: Config. All writes above have returned, so the listing is complete.
    log.debug("Creating config.json")
    policy_file = load_policy(opts.policy_path)
    config = assemble_config(policy_file, layout, ctx.name_to_url)
    config_path = write_config(config, layout.config_path)

    # Phase 5: Rewrite
    run_sugarcoat(opts.sugarcoat, config_path)

    return PipelineResult(
        layout=layout,
        graph_files=graph_files,
        scripts=ctx.scripts,
        config=config,
        config_path=config_path,
    )
