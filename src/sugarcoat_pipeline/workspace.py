"""Staging workspace: a fresh ``gen/`` tree for every run."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from sugarcoat_pipeline.errors import PolicyFileError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagingLayout:
    """Paths inside the staging root."""
    root: Path

    @property
    def graphs_dir(self) -> Path:
        return self.root / "graphs"

    @property
    def output_dir(self) -> Path:
        return self.root / "output"

    @property
    def config_path(self) -> Path:
        return self.root / "config.json"

    @property
    def trace_path(self) -> Path:
        return self.root / "trace.json"

    @property
    def report_path(self) -> Path:
        return self.root / "report.html"

    @property
    def rules_path(self) -> Path:
        return self.root / "rules.txt"

    @property
    def resources_path(self) -> Path:
        return self.root / "resources.json"

    @property
    def graphs_glob(self) -> str:
        return str(self.graphs_dir / "*.graphml")


def prepare_workspace(root: Path, policy_path: Path) -> StagingLayout:
    """Recreate the staging root empty and check the policy file is readable.

    Raises:
        PolicyFileError: policy_path is missing or unreadable. The graphs and
            output directories are not created in that case.
    """
    layout = StagingLayout(root.resolve())
    log.debug("Cleaning up generated dirs")

    if layout.root.exists():
        shutil.rmtree(layout.root)
    layout.root.mkdir(parents=True)

    if not policy_path.is_file() or not os.access(policy_path, os.R_OK):
        raise PolicyFileError(f"{policy_path} not found!")

    layout.graphs_dir.mkdir()
    layout.output_dir.mkdir()
    return layout
