"""Assemble the rewrite engine's config.json from the policy file and staged scripts."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from sugarcoat_pipeline.errors import PolicyFileError
from sugarcoat_pipeline.models import BuildConfig, BundleConfig, PolicyFile, TargetConfig
from sugarcoat_pipeline.utils import list_files, script_stem
from sugarcoat_pipeline.workspace import StagingLayout

log = logging.getLogger(__name__)


def load_policy(policy_path: Path) -> PolicyFile:
    """Parse a JSON (or ``.yaml``/``.yml``) policy file."""
    try:
        text = policy_path.read_text(encoding="utf-8")
    except OSError as e:
        raise PolicyFileError(f"{policy_path}: {e}") from e

    try:
        if policy_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise PolicyFileError(f"{policy_path}: cannot parse: {e}") from e

    if not isinstance(data, dict):
        raise PolicyFileError(f"{policy_path}: expected a mapping at the top level")
    if "policy" not in data:
        raise PolicyFileError(f"{policy_path}: missing 'policy' field")
    try:
        return PolicyFile.model_validate(data)
    except ValidationError as e:
        raise PolicyFileError(f"{policy_path}: {e}") from e


def assemble_config(
    policy_file: PolicyFile,
    layout: StagingLayout,
    name_to_url: dict[str, str],
) -> BuildConfig:
    """Build the config from whatever is in the output directory right now.

    Must be called after every script write has finished; each file there
    becomes one target carrying the default policy.
    """
    passthrough = dict(policy_file.model_extra or {})
    policy = policy_file.policy

    targets: dict[str, TargetConfig] = {}
    for path in list_files(layout.output_dir):
        key = script_stem(path.name)
        url = name_to_url.get(key)
        if url is None:
            log.warning("No source URL recorded for %s", path.name)
        targets[key] = TargetConfig(
            patterns=[url] if url is not None else [],
            policy=policy,
        )

    # Staged fields win over pass-through keys of the same name.
    staged = {
        "graphs": [layout.graphs_glob],
        "code": str(layout.output_dir),
        "trace": str(layout.trace_path),
        "report": str(layout.report_path),
        "bundle": BundleConfig(
            rules=str(layout.rules_path),
            resources=str(layout.resources_path),
        ),
        "targets": targets,
    }
    config = BuildConfig(**{**passthrough, **staged})
    log.debug("Assembled config: %s", config.model_dump(mode="json"))
    return config


def write_config(config: BuildConfig, path: Path) -> Path:
    log.debug("Writing massaged config to %s", path)
    path.write_text(json.dumps(config.model_dump(mode="json"), indent=2), encoding="utf-8")
    return path
