"""Pydantic configuration models for wikipull."""

from pathlib import Path
from typing import Literal, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator

DEFAULT_BASE_URL = "https://zh.minecraft.wiki"


class SanitizerConfig(BaseModel):
    """Configuration for structural sanitization."""

    extra_remove_selectors: list[str] = Field(
        default_factory=list,
        description="CSS selectors removed in addition to the built-in rule set",
    )
    extra_preserve_selectors: list[str] = Field(
        default_factory=list,
        description="CSS selectors never removed, in addition to the built-in rule set",
    )
    simplify_markup: bool = Field(
        True,
        description="Unwrap decorative spans and strip style/data attributes and noise classes",
    )

    model_config = {"extra": "forbid"}


class ImageConfig(BaseModel):
    """Configuration for image normalization."""

    convert_to_absolute: bool = Field(True, description="Rewrite root-relative image sources")
    remove_small_images: bool = Field(True, description="Drop images below the minimum size")
    min_width: int = Field(50, ge=0, description="Minimum declared width in pixels")
    min_height: int = Field(50, ge=0, description="Minimum declared height in pixels")

    model_config = {"extra": "forbid"}


class LinkConfig(BaseModel):
    """Configuration for link normalization."""

    convert_toc_links: bool = Field(
        True,
        description="Rewrite table-of-contents anchors to absolute URLs",
    )
    preserve_external_links: bool = Field(True, description="Keep links to non-wiki hosts")
    wiki_hosts: list[str] = Field(
        default_factory=lambda: ["minecraft.wiki", "minecraftwiki.net"],
        description="Hosts (and their subdomains) treated as the wiki itself",
    )

    model_config = {"extra": "forbid"}


class MarkdownConfig(BaseModel):
    """Configuration for the Markdown rule engine."""

    toc_heading: str = Field("Table of Contents", description="Heading emitted above the TOC list")
    infobox_fallback_title: str = Field(
        "Information",
        description="Heading used for info boxes without a detectable title",
    )
    image_captions: bool = Field(True, description="Emit italic captions under image blocks")

    model_config = {"extra": "forbid"}


class CacheConfig(BaseModel):
    """Configuration for the in-process result cache."""

    enabled: bool = Field(True, description="Memoize rendered pages")
    max_size: int = Field(100, ge=1, description="Maximum number of cached entries")
    ttl_seconds: float = Field(300.0, gt=0, description="Default entry lifetime in seconds")
    cleanup_interval: float = Field(
        60.0,
        ge=0,
        description="Minimum seconds between opportunistic expiry sweeps (0 = every write)",
    )

    model_config = {"extra": "forbid"}


class PerformanceConfig(BaseModel):
    """Configuration for performance tuning."""

    cpu_workers: int = Field(
        4,
        ge=1,
        description="Thread pool workers for the CPU-bound transformation pipeline",
    )
    batch_concurrency: int = Field(
        3,
        ge=1,
        description="Maximum pages processed concurrently by batch retrieval",
    )

    model_config = {"extra": "forbid"}


class WikipullConfig(BaseModel):
    """
    Root configuration model for wikipull.

    Example:
        config = WikipullConfig(
            base_url="https://en.wikipedia.org",
            images=ImageConfig(min_width=32, min_height=32),
        )

    YAML format:
        base_url: https://zh.minecraft.wiki
        images:
          min_width: 32
        cache:
          max_size: 500
    """

    base_url: str = Field(DEFAULT_BASE_URL, description="Wiki origin used to resolve relative URLs")

    sanitizer: SanitizerConfig = Field(default_factory=SanitizerConfig)
    images: ImageConfig = Field(default_factory=ImageConfig)
    links: LinkConfig = Field(default_factory=LinkConfig)
    markdown: MarkdownConfig = Field(default_factory=MarkdownConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {value!r}")
        return value.rstrip("/")

    @property
    def wiki_hosts(self) -> set[str]:
        """Hosts considered internal: the base origin plus configured aliases."""
        hosts = {host.lower() for host in self.links.wiki_hosts}
        hosts.add(urlparse(self.base_url).netloc.lower())
        return hosts

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "WikipullConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "WikipullConfig":
        """Load config from YAML file."""
        return cls.from_yaml(Path(path).read_text(encoding="utf-8"))
