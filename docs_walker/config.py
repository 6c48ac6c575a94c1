"""
Loading and validation of DocsWalker configuration.
Pydantic describes the schema and checks the data.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import urljoin, urlsplit

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from docs_walker.crawler.models import CrawlTarget
from docs_walker.crawler.normalizer import parse_link
from docs_walker.crawler.scope import FETCHABLE_SCHEMES, CrawlScope
from docs_walker.exceptions import WalkerError


def _check_absolute(value: str) -> str:
    parts = urlsplit(value)
    if parts.scheme.lower() not in FETCHABLE_SCHEMES or not parts.netloc:
        raise ValueError(f"expected an absolute http(s) URL, got {value!r}")
    return value


class GitHubConfig(BaseModel):
    """Where and how to list an organisation's repositories."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_url: str = Field("https://api.github.com", description="GitHub REST API root.")
    web_url: str = Field("https://github.com", description="Site the repository pages live on.")
    token: Optional[str] = Field(None, description="API token; GH_TOKEN/GITHUB_TOKEN if unset.")
    per_page: int = Field(100, ge=1, le=100, description="Repositories per API page.")

    @field_validator("api_url", "web_url")
    def _strip_trailing_slash(cls, v: str) -> str:
        return _check_absolute(v).rstrip("/")

    def resolve_token(self) -> Optional[str]:
        return self.token or os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN")


class WalkerConfig(BaseModel):
    """Configuration of one walk."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: str = Field(..., description="Prefix that defines the inside of the walk.")
    ignored_url: Optional[str] = Field(
        None, description="Prefix whose links are not followed unless under base_url."
    )
    initial_url: Optional[str] = Field(
        None, description="Seed page, resolved against base_url (default: base_url)."
    )
    concurrency: int = Field(10, ge=1, description="Number of simultaneous fetches.")
    timeout: float = Field(30.0, gt=0, description="Timeout of a single request (seconds).")
    user_agent: str = Field("DocsWalker/1.0", min_length=1, description="User-Agent header.")
    max_reported_sources: int = Field(
        5, ge=0, description="Linking pages quoted in a failure line."
    )
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    @field_validator("base_url", "ignored_url")
    def _normalize_prefix(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            return str(parse_link(_check_absolute(v), v))
        except WalkerError as exc:
            raise ValueError(str(exc)) from exc

    @model_validator(mode="after")
    def _check_seed(self) -> WalkerConfig:
        try:
            seed = self.seed()
        except WalkerError as exc:
            raise ValueError(str(exc)) from exc
        if not self.scope().in_base(seed):
            raise ValueError(f"initial_url {self.initial_url!r} lies outside base_url")
        return self

    def scope(self) -> CrawlScope:
        return CrawlScope(self.base_url, self.ignored_url)

    def seed(self) -> CrawlTarget:
        start = self.base_url if self.initial_url is None else urljoin(self.base_url, self.initial_url)
        return parse_link(start, self.base_url)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> WalkerConfig:
    """
    Read YAML or JSON and return a validated WalkerConfig.
    Raises FileNotFoundError when the config file does not exist.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return WalkerConfig(**data)


__all__ = ["GitHubConfig", "WalkerConfig", "load_config"]
