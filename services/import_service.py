import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Mapping, Optional

from loguru import logger

from models.project import Project, ProjectStatus
from repository.project_repository import ProjectRepository

Sleep = Callable[[float], Awaitable[None]]
StageHook = Callable[[Project], Awaitable[None] | None]


@dataclass(frozen=True)
class ImportStage:
    requires: ProjectStatus
    enters: ProjectStatus
    delay: float


class ImportStatusEngine:
    """Drives a project from pending to ready without blocking the request.

    One task per project id runs the stages in order. Every stage re-reads
    the row first: a deleted project is never written again, a terminal
    status set by hand ends the chain, and a non-terminal status set by hand
    makes the chain carry on from the stage that starts at that status.
    """

    def __init__(
        self,
        project_repository: ProjectRepository,
        clone_delay: float = 1.0,
        setup_delay: float = 2.0,
        ready_delay: float = 2.0,
        result_url_template: str = "https://replit.com/@user/{name}",
        sleep: Optional[Sleep] = None,
        stage_hooks: Optional[Mapping[ProjectStatus, StageHook]] = None,
    ):
        self.project_repository = project_repository
        self.result_url_template = result_url_template
        self.stages: List[ImportStage] = [
            ImportStage(ProjectStatus.PENDING, ProjectStatus.CLONING, clone_delay),
            ImportStage(ProjectStatus.CLONING, ProjectStatus.SETTING_UP, setup_delay),
            ImportStage(ProjectStatus.SETTING_UP, ProjectStatus.READY, ready_delay),
        ]
        self._sleep = sleep or asyncio.sleep
        self._stage_hooks: Dict[ProjectStatus, StageHook] = dict(stage_hooks or {})
        self._tasks: Dict[int, asyncio.Task] = {}

    def start_import(self, project: Project) -> Optional[asyncio.Task]:
        """Schedule the stage chain for a freshly persisted pending project."""
        existing = self._tasks.get(project.id)
        if existing is not None and not existing.done():
            logger.warning(f"Import for project {project.id} already running, ignoring restart")
            return existing

        task = asyncio.get_running_loop().create_task(
            self._run(project.id, project.display_name),
            name=f"import-project-{project.id}",
        )
        self._tasks[project.id] = task
        task.add_done_callback(lambda t, project_id=project.id: self._forget(project_id, t))
        logger.info(f"Scheduled import for project {project.id} ({project.display_name})")
        return task

    def cancel(self, project_id: int) -> bool:
        """Cancel a live import; callable from request worker threads."""
        task = self._tasks.pop(project_id, None)
        if task is None or task.done():
            return False
        task.get_loop().call_soon_threadsafe(task.cancel)
        logger.info(f"Cancelled import for project {project_id}")
        return True

    def active_imports(self) -> List[int]:
        return [project_id for project_id, task in self._tasks.items() if not task.done()]

    async def shutdown(self) -> None:
        tasks = [task for task in self._tasks.values() if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    def _forget(self, project_id: int, task: asyncio.Task) -> None:
        if self._tasks.get(project_id) is task:
            del self._tasks[project_id]
        if not task.cancelled() and task.exception() is not None:
            logger.opt(exception=task.exception()).error(f"Import task for project {project_id} crashed")

    def _stage_requiring(self, status: str) -> Optional[ImportStage]:
        return next((stage for stage in self.stages if stage.requires.value == status), None)

    def _stage_after(self, stage: ImportStage) -> Optional[ImportStage]:
        index = self.stages.index(stage) + 1
        return self.stages[index] if index < len(self.stages) else None

    async def _run(self, project_id: int, display_name: str) -> None:
        stage = self.stages[0]
        while stage is not None:
            await self._sleep(stage.delay)

            # repository calls are blocking, keep them off the event loop
            project = await asyncio.to_thread(self.project_repository.get, project_id)
            if project is None:
                logger.info(f"Project {project_id} is gone, stopping import before {stage.enters.value}")
                return
            if project.status != stage.requires.value:
                resumed = self._stage_requiring(project.status)
                if resumed is None:
                    logger.info(f"Project {project_id} is {project.status}, stopping import")
                    return
                logger.warning(
                    f"Project {project_id} was moved to {project.status} outside the pipeline, "
                    f"resuming at {resumed.enters.value}"
                )
                stage = resumed

            try:
                await self._run_hook(stage.enters, project)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Import of project {project_id} failed entering {stage.enters.value}: {e}")
                await asyncio.to_thread(
                    self.project_repository.update,
                    project_id,
                    {"status": ProjectStatus.FAILED.value, "error_message": str(e) or type(e).__name__},
                )
                return

            fields = {"status": stage.enters.value}
            if stage.enters is ProjectStatus.READY:
                fields["result_url"] = self.result_url_for(display_name)

            if await asyncio.to_thread(self.project_repository.update, project_id, fields) is None:
                logger.info(f"Project {project_id} was deleted during {stage.enters.value}, dropping write")
                return
            logger.info(f"Project {project_id} -> {stage.enters.value}")
            stage = self._stage_after(stage)

    async def _run_hook(self, status: ProjectStatus, project: Project) -> None:
        hook = self._stage_hooks.get(status)
        if hook is None:
            return
        result = hook(project)
        if asyncio.iscoroutine(result):
            await result

    def result_url_for(self, display_name: str) -> str:
        return self.result_url_template.format(name=display_name)
