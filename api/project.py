from typing import List

from dependency_injector.wiring import Provide
from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from core.container import Container
from core.dependencies import get_current_user
from core.middleware import inject
from models.user import User
from schema.base_schema import Message
from schema.project_schema import CreateProject, Project, UpdateProject
from services.project_service import ProjectService

router = APIRouter(prefix="/projects", tags=["project"])


@router.get("", response_model=List[Project])
@inject
def list_projects(
       user: User = Depends(get_current_user),
       service: ProjectService = Depends(Provide[Container.project_service])
):
    return service.list_for(user)


@router.post("", response_model=Project)
@inject
async def create_project(
       project: CreateProject,
       user: User = Depends(get_current_user),
       service: ProjectService = Depends(Provide[Container.project_service])
):
    # the insert runs in the threadpool, the import task is scheduled on the loop
    created = await run_in_threadpool(service.add, project, user)
    service.start_import(created)
    return created


@router.get("/{project_id}", response_model=Project)
@inject
def get_project(
       project_id: int,
       user: User = Depends(get_current_user),
       service: ProjectService = Depends(Provide[Container.project_service])
):
    return service.get_owned(project_id, user)


@router.patch("/{project_id}", response_model=Project)
@inject
def update_project(
       project_id: int,
       update: UpdateProject,
       user: User = Depends(get_current_user),
       service: ProjectService = Depends(Provide[Container.project_service])
):
    return service.patch(project_id, update, user)


@router.delete("/{project_id}", response_model=Message)
@inject
def delete_project(
       project_id: int,
       user: User = Depends(get_current_user),
       service: ProjectService = Depends(Provide[Container.project_service])
):
    service.remove(project_id, user)
    return Message(message="Project deleted successfully")
