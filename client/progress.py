from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import urlparse

from models.project import ACTIVE_STATUSES, ProjectStatus


@dataclass(frozen=True)
class ImportStep:
    key: ProjectStatus
    label: str
    description: str


class StepStatus(str, Enum):
    COMPLETED = "completed"
    ACTIVE = "active"
    PENDING = "pending"


IMPORT_STEPS: Tuple[ImportStep, ...] = (
    ImportStep(ProjectStatus.PENDING, "Validating Repository", "Checking repository access and permissions"),
    ImportStep(ProjectStatus.CLONING, "Cloning Repository", "Downloading repository files and history"),
    ImportStep(ProjectStatus.SETTING_UP, "Setting up Environment", "Installing dependencies and configuring project"),
    ImportStep(ProjectStatus.READY, "Creating Replit Project", "Finalizing project setup and configuration"),
)


@dataclass(frozen=True)
class ImportProgress:
    project_name: Optional[str] = None
    steps: List[Tuple[ImportStep, StepStatus]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.project_name is None

    def lines(self) -> List[str]:
        if self.is_empty:
            return ["No Active Import", "Start by entering a GitHub repository URL"]
        out = [f"Importing: {self.project_name}"]
        for step, status in self.steps:
            out.append(f"[{status.value:>9}] {step.label} - {step.description}")
        return out


def _status_of(project: Any) -> Optional[str]:
    if isinstance(project, Mapping):
        return project.get("status")
    return getattr(project, "status", None)


def _field(project: Any, name: str, camel: str) -> Any:
    if isinstance(project, Mapping):
        return project.get(camel, project.get(name))
    return getattr(project, name, None)


def _name_of(project: Any) -> Optional[str]:
    return _field(project, "display_name", "displayName")


def select_active_import(projects: Iterable[Any]) -> Optional[Any]:
    """First project still moving through the pipeline, in the order given."""
    active = {status.value for status in ACTIVE_STATUSES}
    for project in projects:
        if _status_of(project) in active:
            return project
    return None


def derive_step_statuses(
    status: str | ProjectStatus,
    steps: Sequence[ImportStep] = IMPORT_STEPS,
) -> List[Tuple[ImportStep, StepStatus]]:
    """Steps before the current one are completed, the current one is active.

    A status outside the step list (failed) leaves every step pending.
    """
    value = status.value if isinstance(status, ProjectStatus) else status
    keys = [step.key.value for step in steps]
    current = keys.index(value) if value in keys else -1

    derived = []
    for index, step in enumerate(steps):
        if current >= 0 and index < current:
            derived.append((step, StepStatus.COMPLETED))
        elif index == current:
            derived.append((step, StepStatus.ACTIVE))
        else:
            derived.append((step, StepStatus.PENDING))
    return derived


def render_progress(projects: Iterable[Any]) -> ImportProgress:
    project = select_active_import(projects)
    if project is None:
        return ImportProgress()
    return ImportProgress(project_name=_name_of(project), steps=derive_step_statuses(_status_of(project)))


STATUS_BADGES = {
    ProjectStatus.READY.value: "Ready",
    ProjectStatus.FAILED.value: "Failed",
    ProjectStatus.PENDING.value: "Starting",
    ProjectStatus.CLONING.value: "Cloning",
    ProjectStatus.SETTING_UP.value: "Setting Up",
}


def status_badge(status: Optional[str | ProjectStatus]) -> str:
    value = status.value if isinstance(status, ProjectStatus) else status
    return STATUS_BADGES.get(value, "Unknown")


def _created_of(project: Any) -> datetime:
    created = _field(project, "created_at", "createdAt")
    if isinstance(created, str):
        created = datetime.fromisoformat(created)
    return created or datetime.min


def recent_projects(projects: Iterable[Any], limit: int = 5) -> List[Any]:
    """Newest first, at most ``limit`` of them."""
    return sorted(projects, key=_created_of, reverse=True)[:limit]


@dataclass(frozen=True)
class RecentProject:
    name: str
    source_path: str
    badge: str
    result_url: Optional[str] = None

    def line(self) -> str:
        line = f"{self.name:<24} {self.source_path:<32} [{self.badge}]"
        return f"{line} {self.result_url}" if self.result_url else line


def render_recent_projects(projects: Iterable[Any], limit: int = 5) -> List[RecentProject]:
    rendered = []
    for project in recent_projects(projects, limit):
        status = _status_of(project)
        source_url = _field(project, "source_url", "sourceUrl") or ""
        result_url = _field(project, "result_url", "resultUrl")
        rendered.append(
            RecentProject(
                name=_name_of(project) or "",
                source_path=urlparse(source_url).path,
                badge=status_badge(status),
                # only a finished import has somewhere to open
                result_url=result_url if status == ProjectStatus.READY.value else None,
            )
        )
    return rendered


def recent_project_lines(projects: Iterable[Any], limit: int = 5) -> List[str]:
    rendered = render_recent_projects(projects, limit)
    if not rendered:
        return ["No Projects Yet", "Import your first GitHub project to get started"]
    return [project.line() for project in rendered]
