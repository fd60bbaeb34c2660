"""JSON persistence for projects, one ``<name>.json`` file per project.

INVARIANT: Loading never loses data. Missing, empty, or corrupt files
yield a fresh project plus a ``RECOVERY_WARNING``; unparseable content is
kept verbatim in the new project's notes.

Every function takes the storage directory explicitly. :class:`ProjectStore`
binds one directory for the service layer.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from planctl.domain.errors import DomainError
from planctl.domain.legacy import project_from_dict, project_to_dict
from planctl.domain.models import Project

logger = logging.getLogger(__name__)

SUFFIX = ".json"
RECOVERED_JSON_BANNER = "=== RECOVERED DATA (could not parse JSON) ==="
RECOVERED_DATA_BANNER = "=== RECOVERED DATA (invalid project data) ==="


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def project_path(name: str, directory: Path) -> tuple[Path | None, DomainError | None]:
    """File path for project *name*, refusing names that leave *directory*."""
    if not name or name in (".", "..") or Path(name).name != name or "\\" in name:
        return None, DomainError.invalid(f"Invalid project name: {name!r}", name=name)
    path = directory / f"{name}{SUFFIX}"
    if path.resolve().parent != directory.resolve():
        return None, DomainError.invalid(f"Invalid project name: {name!r}", name=name)
    return path, None


def _recovered(name: str, banner: str, raw: str) -> Project:
    project = Project.new(name)
    project.notes = f"{banner}\n{raw}"
    return project


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def save(project: Project, directory: Path) -> tuple[bool, DomainError | None]:
    """Write *project* to ``<directory>/<name>.json``, creating the directory."""
    name = project.project_info.name or project.project_info.id
    path, err = project_path(name, directory)
    if path is None:
        return False, err

    payload = json.dumps(project_to_dict(project), indent=2, ensure_ascii=False)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(payload + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed to save project %s: %s", name, exc)
        return False, DomainError.persistence(
            f"Failed to save project {name}: {exc}", path=str(path)
        )
    logger.debug("Saved project %s to %s", name, path)
    return True, None


def load(name: str, directory: Path) -> tuple[Project | None, DomainError | None]:
    """Read project *name*.

    Returns ``(project, None)`` on a clean load and ``(project, warning)``
    when the project had to be synthesized. Only I/O failures return no
    project.
    """
    path, err = project_path(name, directory)
    if path is None:
        return None, err

    if not path.exists():
        logger.info("Project file %s missing, starting fresh", path)
        return Project.new(name), DomainError.recovery(
            "Created new project (file did not exist)", path=str(path)
        )

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        return None, DomainError.persistence(
            f"Failed to read project {name}: {exc}", path=str(path)
        )

    if not raw.strip():
        return Project.new(name), DomainError.recovery(
            "Created new project (file was empty)", path=str(path)
        )

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.warning("Project file %s is not valid JSON: %s", path, exc)
        return _recovered(name, RECOVERED_JSON_BANNER, raw), DomainError.recovery(
            "Created new project with recovered data (JSON parse failed)", path=str(path)
        )

    project = None
    if isinstance(data, dict):
        try:
            project = project_from_dict(data)
        except (ValidationError, TypeError, AttributeError) as exc:
            logger.warning("Project file %s has invalid data: %s", path, exc)
    if project is None:
        return _recovered(name, RECOVERED_DATA_BANNER, raw), DomainError.recovery(
            "Created new project with recovered data (invalid project data)", path=str(path)
        )

    if not project.project_info.name:
        project.project_info.name = name
    if not project.project_info.id:
        project.project_info.id = name
    logger.debug("Loaded project %s from %s", name, path)
    return project, None


def list_projects(directory: Path) -> list[str]:
    """Sorted project names in *directory*; empty if it does not exist."""
    if not directory.is_dir():
        return []
    return sorted(path.stem for path in directory.glob(f"*{SUFFIX}") if path.is_file())


def delete(name: str, directory: Path) -> tuple[bool, DomainError | None]:
    path, err = project_path(name, directory)
    if path is None:
        return False, err
    if not path.exists():
        return False, DomainError.not_found(f"Project not found: {name}", name=name)
    try:
        path.unlink()
    except OSError as exc:
        return False, DomainError.persistence(
            f"Failed to delete project {name}: {exc}", path=str(path)
        )
    logger.debug("Deleted project %s", name)
    return True, None


class ProjectStore:
    """Persistence bound to one storage directory."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory).expanduser()

    def save(self, project: Project) -> tuple[bool, DomainError | None]:
        return save(project, self.directory)

    def load(self, name: str) -> tuple[Project | None, DomainError | None]:
        return load(name, self.directory)

    def list_projects(self) -> list[str]:
        return list_projects(self.directory)

    def delete(self, name: str) -> tuple[bool, DomainError | None]:
        return delete(name, self.directory)

    def path_for(self, name: str) -> tuple[Path | None, DomainError | None]:
        return project_path(name, self.directory)

    def exists(self, name: str) -> bool:
        path, _ = self.path_for(name)
        return path is not None and path.exists()
