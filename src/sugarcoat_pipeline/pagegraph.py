"""Client for the ``pagegraph-cli`` query engine.

Every query is one blocking subprocess call scoped to a single graph file:

    pagegraph-cli -f <graph> adblock_rules -l <filter-list>
    pagegraph-cli -f <graph> downstream_requests <edge-id> --requests
    pagegraph-cli -f <graph> request_id_info <request-id>

Each prints JSON on stdout.
"""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path

from pydantic import ValidationError

from sugarcoat_pipeline.errors import QueryCommandError, QueryOutputError
from sugarcoat_pipeline.models import AdblockMatch, RequestInfo

log = logging.getLogger(__name__)


class PageGraphCLI:
    """Query engine bound to one graph file."""

    def __init__(self, command: list[str], graph_file: Path) -> None:
        self.command = list(command)
        self.graph_file = graph_file

    def _query(self, *args: str):
        cmd = [*self.command, "-f", str(self.graph_file), *args]
        log.debug("pagegraph query: %s", cmd)
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, encoding="utf-8", errors="replace",
            )
        except OSError as e:
            raise QueryOutputError(f"could not run {self.command[0]!r}: {e}") from e
        if result.returncode != 0:
            raise QueryCommandError(cmd, result.returncode, result.stderr)
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise QueryOutputError(f"{args[0]}: invalid JSON from query engine: {e}") from e

    def adblock_rules(self, filter_list: Path | None = None) -> list[AdblockMatch]:
        args = ["adblock_rules"]
        if filter_list is not None:
            args += ["-l", str(filter_list)]
        data = self._query(*args)
        if not isinstance(data, list):
            raise QueryOutputError("adblock_rules: expected a JSON array")
        try:
            return [AdblockMatch.model_validate(record) for record in data]
        except ValidationError as e:
            raise QueryOutputError(f"adblock_rules: {e}") from e

    def downstream_requests(self, edge_id: str) -> list[str]:
        data = self._query("downstream_requests", edge_id, "--requests")
        if not isinstance(data, list):
            raise QueryOutputError("downstream_requests: expected a JSON array")
        return [str(request_id) for request_id in data]

    def request_id_info(self, request_id: str) -> RequestInfo:
        """Source and origin URL of a request.

        Raises:
            QueryCommandError: the request is not associated with script content.
        """
        data = self._query("request_id_info", request_id)
        try:
            return RequestInfo.model_validate(data)
        except ValidationError as e:
            raise QueryOutputError(f"request_id_info {request_id}: {e}") from e
