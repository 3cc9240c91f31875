"""CLI entry point for sugarcoat-pipeline."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from sugarcoat_pipeline import __version__
from sugarcoat_pipeline.errors import PipelineError
from sugarcoat_pipeline.pipeline import PipelineOptions, run_pipeline
from sugarcoat_pipeline.utils import split_command

DEFAULT_CRAWL_SECS = 30


def _command(ctx, param, value: str) -> list[str]:
    try:
        return split_command(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.command()
@click.option(
    "-b", "--binary", required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the PageGraph enabled build of Brave.",
)
@click.option("-u", "--url", required=True, help="The URL to record.")
@click.option(
    "-t", "--secs", type=int, default=DEFAULT_CRAWL_SECS, show_default=True,
    help="The dwell time in seconds.",
)
@click.option(
    "--debug", type=click.Choice(["none", "debug"]), default="none", show_default=True,
    help="Print debugging information.",
)
@click.option(
    "-l", "--filter-list", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Filter list to use.",
)
@click.option(
    "-p", "--policy", "policy_path", type=click.Path(dir_okay=False, path_type=Path),
    default="policy.json", show_default=True,
    help="Path to policy file (JSON, or YAML by .yaml/.yml suffix).",
)
@click.option(
    "--gen-dir", type=click.Path(file_okay=False, path_type=Path), default="gen",
    show_default=True,
    help="Staging directory. Wiped at the start of every run.",
)
@click.option(
    "--pagegraph-cli", default="./pagegraph-cli", show_default=True, callback=_command,
    help="Command used to query graph files.",
)
@click.option(
    "--crawler", default="npm run crawl --", show_default=True, callback=_command,
    help="Command used to crawl the URL.",
)
@click.option(
    "--sugarcoat", default="npm run sugarcoat --", show_default=True, callback=_command,
    help="Command used to rewrite the extracted scripts.",
)
@click.version_option(version=__version__)
def main(
    binary: Path,
    url: str,
    secs: int,
    debug: str,
    filter_list: Path | None,
    policy_path: Path,
    gen_dir: Path,
    pagegraph_cli: list[str],
    crawler: list[str],
    sugarcoat: list[str],
) -> None:
    """CLI that implements the SugarCoat pipeline."""
    logging.basicConfig(
        level=logging.DEBUG if debug != "none" else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
    )

    opts = PipelineOptions(
        binary=binary,
        url=url,
        seconds=secs,
        debug=debug,
        filter_list=filter_list,
        policy_path=policy_path,
        gen_dir=gen_dir,
        pagegraph_cli=pagegraph_cli,
        crawler=crawler,
        sugarcoat=sugarcoat,
    )

    try:
        result = run_pipeline(opts)
    except PipelineError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(e.exit_code)

    click.echo(f"Extracted {len(result.scripts)} script(s) into {result.layout.output_dir}")
    click.echo(f"Config written to {result.config_path}")
    click.echo(f"Report written to {result.layout.report_path}")


if __name__ == "__main__":
    main()
