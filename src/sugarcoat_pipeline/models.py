"""Pydantic models for crawl parameters, query-engine records and the build config."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Crawl engine ────────────────────────────────────────────────────────────

class CrawlArgs(BaseModel):
    """Parameter set accepted by the crawl engine."""
    model_config = ConfigDict(extra="forbid")

    binary: Path
    urls: list[str] = Field(min_length=1)
    seconds: int = Field(gt=0)
    output: Path
    debug: Literal["none", "debug"] = "none"
    filter_list: Path | None = None

    @field_validator("binary")
    @classmethod
    def _binary_exists(cls, v: Path) -> Path:
        if not v.is_file():
            raise ValueError(f"browser binary not found: {v}")
        return v

    @field_validator("urls")
    @classmethod
    def _urls_are_http(cls, v: list[str]) -> list[str]:
        for url in v:
            parsed = urlparse(url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError(f"not an http(s) URL: {url!r}")
        return v

    @field_validator("output")
    @classmethod
    def _output_is_dir(cls, v: Path) -> Path:
        if not v.is_dir():
            raise ValueError(f"output directory does not exist: {v}")
        return v

    @field_validator("filter_list")
    @classmethod
    def _filter_list_exists(cls, v: Path | None) -> Path | None:
        if v is not None and not v.is_file():
            raise ValueError(f"filter list not found: {v}")
        return v


# ── Query engine responses ──────────────────────────────────────────────────

class AdblockMatch(BaseModel):
    """One ``adblock_rules`` record. ``requests`` holds ``[tag, edge_id]`` pairs."""
    requests: list[tuple[Any, Any]] = Field(default_factory=list)


class RequestInfo(BaseModel):
    """``request_id_info`` result for a request that carries script content."""
    url: str
    source: str


# ── Extraction ──────────────────────────────────────────────────────────────

class ExtractedScript(BaseModel):
    name: str
    source_url: str
    source_text: str
    path: Path


# ── Build configuration ─────────────────────────────────────────────────────

class PolicyFile(BaseModel):
    """Policy configuration as read from disk. Unknown keys pass through."""
    model_config = ConfigDict(extra="allow")

    policy: Any


class BundleConfig(BaseModel):
    rules: str
    resources: str


class TargetConfig(BaseModel):
    patterns: list[str] = Field(default_factory=list)
    policy: Any = None


class BuildConfig(BaseModel):
    """Configuration consumed by the rewrite engine.

    Pass-through keys from the policy file are kept as extra fields; the
    top-level ``policy`` key never appears here.
    """
    model_config = ConfigDict(extra="allow")

    graphs: list[str]
    code: str
    trace: str
    report: str
    bundle: BundleConfig
    targets: dict[str, TargetConfig] = Field(default_factory=dict)
