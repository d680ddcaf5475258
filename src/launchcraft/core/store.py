"""Session-scoped store for the active project and its generated copy."""

import copy
import hashlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol

from launchcraft.core.logging import get_logger
from launchcraft.schemas.copy import GenerationResult
from launchcraft.schemas.project import ProjectDescription
from launchcraft.schemas.session import GenerationState, Project, utcnow

logger = get_logger("launchcraft.store")

# Vocabulary checks belong to the input boundary; stored projects are trusted
_STORED_CONTEXT = {"strict_interests": False}


def write_json_atomic(path: Path, data: Any) -> None:
    """Write JSON through a private temp file in the same directory, then rename over path."""
    with tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f"{path.stem}.",
        suffix=".tmp",
        delete=False,
    ) as tmp:
        json.dump(data, tmp, indent=2, ensure_ascii=False)
    try:
        os.replace(tmp.name, path)
    except OSError:
        os.unlink(tmp.name)
        raise


class StateRepository(Protocol):
    """Persistence for the durable part of a session's state."""

    def load(self, session_id: str) -> Optional[dict[str, Any]]:
        """Return the saved state for a session, or None."""
        ...

    def save(self, session_id: str, state: dict[str, Any]) -> None:
        """Replace the saved state for a session."""
        ...

    def delete(self, session_id: str) -> bool:
        """Delete the saved state; True if something was deleted."""
        ...


class InMemoryStateRepository:
    """Dictionary-backed repository. Each instance is isolated."""

    def __init__(self):
        self._states: dict[str, dict[str, Any]] = {}

    def load(self, session_id: str) -> Optional[dict[str, Any]]:
        state = self._states.get(session_id)
        return copy.deepcopy(state) if state is not None else None

    def save(self, session_id: str, state: dict[str, Any]) -> None:
        self._states[session_id] = copy.deepcopy(state)

    def delete(self, session_id: str) -> bool:
        return self._states.pop(session_id, None) is not None


class FileStateRepository:
    """One JSON document per session in a directory."""

    def __init__(self, directory: Path):
        """Initialize repository with its directory."""
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, session_id: str) -> Path:
        key_hash = hashlib.sha256(session_id.encode("utf-8")).hexdigest()
        return self.directory / f"{key_hash}.json"

    def load(self, session_id: str) -> Optional[dict[str, Any]]:
        path = self._path(session_id)
        if not path.exists():
            return None

        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(
                f"Ignoring corrupt session file {path}: {e}",
                context={"session_id": session_id},
            )
            return None

    def save(self, session_id: str, state: dict[str, Any]) -> None:
        write_json_atomic(self._path(session_id), state)

    def delete(self, session_id: str) -> bool:
        path = self._path(session_id)
        if path.exists():
            path.unlink()
            return True
        return False


def _load_project(data: dict[str, Any]) -> Project:
    return Project.model_validate(data, context=_STORED_CONTEXT)


class ProjectStore:
    """
    Projects of one session, with a single active project.

    Only `projects` and `current_project` are persisted, after every mutation.
    `generation_state` is process-local and starts from its default on load,
    since an interrupted provider call cannot be resumed.
    """

    def __init__(self, repository: StateRepository, session_id: str = "default"):
        self.repository = repository
        self.session_id = session_id
        self.generation_state = GenerationState()
        self._projects: list[Project] = []
        self._current: Optional[Project] = None
        self._load()

    def _load(self) -> None:
        data = self.repository.load(self.session_id)
        if not data:
            return
        self._projects = [_load_project(item) for item in data.get("projects", [])]
        current = data.get("currentProject")
        self._current = _load_project(current) if current else None

    def _persist(self) -> None:
        self.repository.save(
            self.session_id,
            {
                "projects": [p.model_dump(mode="json", by_alias=True) for p in self._projects],
                "currentProject": (
                    self._current.model_dump(mode="json", by_alias=True) if self._current else None
                ),
            },
        )

    @property
    def current_project(self) -> Optional[Project]:
        return self._current

    @property
    def projects(self) -> list[Project]:
        return list(self._projects)

    def get_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self._projects if p.id == project_id), None)

    def set_current_project(self, project: Optional[Project]) -> None:
        """Replace the active project wholesale (None clears it)."""
        self._current = project
        self._persist()

    def update_current_project(
        self,
        updates: Optional[dict[str, Any]] = None,
        **changes: Any,
    ) -> Optional[Project]:
        """
        Merge fields into the active project and refresh its `updated_at`.

        Keys may be attribute names or wire names. The matching entry in
        `projects` is replaced too.

        Returns:
            The updated project, or None (and no change) if nothing is active

        Raises:
            ValueError: For unknown fields or an attempt to change the id
        """
        if self._current is None:
            return None

        merged = self._current.model_dump()
        for key, value in {**(updates or {}), **changes}.items():
            name = Project.field_name(key)
            if name is None:
                raise ValueError(f"Unknown project field: {key}")
            if name == "id":
                raise ValueError("Project id cannot be changed")
            merged[name] = value
        merged["updated_at"] = utcnow()

        updated = _load_project(merged)
        self._current = updated
        self._projects = [updated if p.id == updated.id else p for p in self._projects]
        self._persist()
        return updated

    def record_result(self, result: GenerationResult) -> Optional[Project]:
        """Store a generation result on the active project, replacing one of the same kind."""
        if self._current is None:
            return None
        return self.update_current_project(results={**self._current.results, result.kind: result})

    def add_project(self, project: Project) -> Project:
        """Append a project (replacing one with the same id) and make it active."""
        if self.get_project(project.id) is not None:
            self._projects = [project if p.id == project.id else p for p in self._projects]
        else:
            self._projects.append(project)
        self._current = project
        self._persist()
        return project

    def create_project(self, description: ProjectDescription) -> Project:
        """Create a project for a validated description and make it active."""
        return self.add_project(Project(description=description))

    def delete_project(self, project_id: str) -> bool:
        """Remove a project; clears the active project if it was the one deleted."""
        before = len(self._projects)
        self._projects = [p for p in self._projects if p.id != project_id]
        deleted = len(self._projects) != before
        if self._current is not None and self._current.id == project_id:
            self._current = None
            deleted = True
        self._persist()
        return deleted

    def set_generation_state(self, **changes: Any) -> GenerationState:
        merged = {**self.generation_state.model_dump(), **changes}
        self.generation_state = GenerationState.model_validate(merged)
        return self.generation_state

    def reset_generation_state(self) -> GenerationState:
        self.generation_state = GenerationState()
        return self.generation_state

    def clear_all(self) -> None:
        """Drop every project of the session, active one included."""
        self._projects = []
        self._current = None
        self.generation_state = GenerationState()
        self.repository.delete(self.session_id)
