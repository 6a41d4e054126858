"""Configuration models."""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models import Recipient


class NotifyConfig(BaseModel):
    """Teams webhook configuration."""

    webhook_url: Optional[str] = Field(None, description="Workflows webhook URL (prefer webhook_url_env)")
    webhook_url_env: Optional[str] = Field("TEAMS_WEBHOOK", description="Environment variable for webhook URL")
    timeout: float = Field(30.0, description="HTTP timeout in seconds", gt=0)


class StorageConfig(BaseModel):
    """Blob storage configuration."""

    container_url: Optional[str] = Field(None, description="Container URL or local directory")
    container_url_env: Optional[str] = Field(None, description="Environment variable for container URL")


class RunnerConfig(BaseModel):
    """Task runner configuration."""

    project_dir: str = Field(".", description="Directory holding the targets pipeline")
    rscript: str = Field("Rscript", description="Rscript executable")
    timeout: Optional[float] = Field(None, description="Timeout for runner commands in seconds")


class RunDefaults(BaseModel):
    """Default run parameters."""

    upload_targets: List[str] = Field(default_factory=list, description="Targets uploaded after a clean run")
    upload_folders: List[str] = Field(
        default_factory=list,
        description="Local folders uploaded after a clean run",
    )
    forced: bool = Field(False, description="Overwrite existing blobs")


class ConfigModel(BaseModel):
    """Main configuration model."""

    project_name: str = Field(..., description="Project name used in blob paths and cards")
    notify: NotifyConfig = Field(default_factory=NotifyConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    run_defaults: RunDefaults = Field(default_factory=RunDefaults)
    ping: List[Recipient] = Field(default_factory=list, description="Maintainers pinged on every report")

    @field_validator("project_name")
    @classmethod
    def validate_project_name(cls, v: str) -> str:
        """Project name ends up in blob paths."""
        v = v.strip()
        if not v or "/" in v:
            raise ValueError(f"Invalid project name: {v!r}")
        return v
