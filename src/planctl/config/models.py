"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``planctl.toml`` only contains
overrides. No section is required.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_STORAGE_DIR = Path("~/.local/share/planctl/projects")


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    directory: Path = DEFAULT_STORAGE_DIR

    @property
    def resolved_directory(self) -> Path:
        return self.directory.expanduser()


class ProjectConfig(BaseModel):
    """[project] section."""

    model_config = {"frozen": True}

    default: str | None = None


class TreeConfig(BaseModel):
    """[tree] section: Job visibility in tree listings."""

    model_config = {"frozen": True}

    show_completed_jobs: bool = False
    show_incomplete_jobs: bool = True


class DocumentConfig(BaseModel):
    """[documents] section."""

    model_config = {"frozen": True}

    track_code_fences: bool = True


class SessionConfig(BaseModel):
    """[session] section: defaults for newly started sessions."""

    model_config = {"frozen": True}

    default_type: str = ""
    planned_duration_minutes: int = Field(default=0, ge=0)


class PlanConfig(BaseModel):
    """All ``planctl.toml`` sections."""

    model_config = {"frozen": True}

    storage: StorageConfig = Field(default_factory=StorageConfig)
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    tree: TreeConfig = Field(default_factory=TreeConfig)
    documents: DocumentConfig = Field(default_factory=DocumentConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
