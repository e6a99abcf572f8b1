from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.cors import CORSMiddleware
from util.class_object import singleton

from api.routes import routers as v1_routers
from core.config import configs
from core.container import Container
from core.logging import setup_logging


@singleton
class AppCreator:
    def __init__(self):
        setup_logging(configs.LOG_LEVEL)

        # set container
        self.container = Container()

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            # create tables at startup (simple bootstrap; switch to Alembic for prod)
            self.container.db().create_database()
            logger.info(f"{configs.PROJECT_NAME} started")
            yield
            await self.container.import_engine().shutdown()
            logger.info(f"{configs.PROJECT_NAME} stopped")

        # set app default
        self.app = FastAPI(
            title=configs.PROJECT_NAME,
            openapi_url=f"{configs.API}/openapi.json",
            version="0.0.1",
            lifespan=lifespan,
        )

        # set cors
        if configs.BACKEND_CORS_ORIGINS:
            self.app.add_middleware(
                CORSMiddleware,
                allow_origins=[str(origin) for origin in configs.BACKEND_CORS_ORIGINS],
                allow_credentials=True,
                allow_methods=["*"],
                allow_headers=["*"],
            )

        @self.app.exception_handler(RequestValidationError)
        async def validation_exception_handler(request: Request, exc: RequestValidationError):
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
            )

        @self.app.exception_handler(SQLAlchemyError)
        async def persistence_exception_handler(request: Request, exc: SQLAlchemyError):
            logger.exception(f"Persistence failure on {request.method} {request.url.path}: {exc}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": "Internal server error"},
            )

        # set routes
        @self.app.get("/")
        def root():
            return "service is working"

        self.app.include_router(v1_routers, prefix=configs.API)


app_creator = AppCreator()
app = app_creator.app
container = app_creator.container


def main():
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8080,
        reload=False,
        log_level=configs.LOG_LEVEL.lower(),
        loop="asyncio"
    )


if __name__ == "__main__":
    main()
