"""Pydantic models for service configuration."""

import hashlib
import json
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class GSARunConfig(BaseModel):
    """Settings for the external enrichment command."""

    command: str = Field(
        default="gsa_run.R",
        min_length=1,
        description="Executable that computes gene-set enrichment",
    )
    pvalue: float = Field(
        default=0.05,
        gt=0.0,
        le=1.0,
        description="Significance threshold passed via --pvalue",
    )
    cores: int = Field(
        default=4,
        ge=1,
        description="Concurrency hint passed via -c",
    )
    max_concurrent_runs: int = Field(
        default=2,
        ge=1,
        description="Maximum simultaneous enrichment runs per worker process",
    )
    run_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0.0,
        description="Kill the command after this many seconds (None = no limit)",
    )


class ServerConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field(
        default="0.0.0.0",
        description="Interface to bind",
    )
    port: int = Field(
        default=3001,
        ge=1,
        le=65535,
        description="Port to listen on",
    )
    workers: Optional[int] = Field(
        default=None,
        ge=1,
        description="Worker processes (None = one per CPU)",
    )
    default_format: Literal["tsv", "json"] = Field(
        default="json",
        description="Error format for routes without a FORMAT parameter",
    )


class ServiceConfig(BaseModel):
    """Main service configuration."""

    data_dir: Path = Field(
        ...,
        description="Directory holding <organism>.po databases and contrastTitles.tsv",
    )
    working_dir: Path = Field(
        default=Path("/tmp"),
        description="Directory for temporary enrichment result files",
    )
    log_dir: Path = Field(
        default=Path("logs"),
        description="Directory for rotated access logs",
    )
    contrast_titles_path: Optional[Path] = Field(
        default=None,
        description="Tab-delimited accession/contrast/title file "
        "(default: <data_dir>/contrastTitles.tsv)",
    )
    atlas_base_url: str = Field(
        default="http://www.ebi.ac.uk/gxa",
        description="Base URL used to build experiment links",
    )
    max_genes: int = Field(
        default=100,
        ge=1,
        description="Maximum number of gene identifiers per request",
    )
    gsa: GSARunConfig = Field(
        default_factory=GSARunConfig,
        description="External command settings",
    )
    server: ServerConfig = Field(
        default_factory=ServerConfig,
        description="HTTP server settings",
    )

    @field_validator("working_dir", "log_dir")
    @classmethod
    def create_directory(cls, v: Path) -> Path:
        """Create directory if it doesn't exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    @field_validator("atlas_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def titles_path(self) -> Path:
        """Resolved path of the contrast title mapping file."""
        if self.contrast_titles_path is not None:
            return self.contrast_titles_path
        return self.data_dir / "contrastTitles.tsv"

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values,
        useful for telling apart workers started with different settings.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
