from fastapi import APIRouter
from api.auth import router as auth_router
from api.project import router as project_router

routers = APIRouter()

routers.include_router(auth_router, tags=["auth"])
routers.include_router(project_router, tags=["v1"])
