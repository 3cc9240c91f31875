"""Fatal pipeline errors. Every subclass terminates the run with ``exit_code``."""

from __future__ import annotations


class PipelineError(Exception):
    exit_code = 1


class PolicyFileError(PipelineError):
    """Policy configuration file is missing, unreadable or malformed."""


class CrawlValidationError(PipelineError):
    """Crawl parameters were rejected before the crawler was started."""


class CrawlError(PipelineError):
    """The crawl engine could not be run or exited with a nonzero status."""


class EmptyCrawlError(PipelineError):
    """Crawling finished but left no graph files behind."""


class QueryCommandError(PipelineError):
    """The query engine exited with a nonzero status."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str = "") -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr and stderr.strip() else ""
        super().__init__(f"{' '.join(cmd)} exited with status {returncode}{detail}")


class QueryOutputError(PipelineError):
    """The query engine could not be run or printed something other than the expected JSON."""


class RewriteError(PipelineError):
    """The rewrite engine could not be run or exited with a nonzero status."""
