"""Client-side helpers: import progress view, recent projects, session context and poller."""

from client.poller import ImportStatusPoller
from client.progress import (
    IMPORT_STEPS,
    ImportProgress,
    ImportStep,
    RecentProject,
    StepStatus,
    derive_step_statuses,
    recent_project_lines,
    recent_projects,
    render_progress,
    render_recent_projects,
    select_active_import,
    status_badge,
)
from client.session import SessionContext, sign_in

__all__ = [
    "IMPORT_STEPS",
    "ImportProgress",
    "ImportStatusPoller",
    "ImportStep",
    "RecentProject",
    "SessionContext",
    "StepStatus",
    "derive_step_statuses",
    "recent_project_lines",
    "recent_projects",
    "render_progress",
    "render_recent_projects",
    "select_active_import",
    "sign_in",
    "status_badge",
]
