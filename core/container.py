from dependency_injector import containers, providers

from core.config import configs
from core.database import Database
from repository.project_repository import ProjectRepository
from repository.user_repository import UserRepository
from services.identity_service import MockGoogleIdentityProvider
from services.import_service import ImportStatusEngine
from services.project_service import ProjectService
from services.user_service import UserService


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(
        modules=[
            "api.auth",
            "api.project",
            "core.dependencies",
        ]
    )

    db = providers.Singleton(Database, db_url=configs.DATABASE_URI, echo=configs.DB_ECHO)

    project_repository = providers.Factory(ProjectRepository, session_factory=db.provided.session)

    user_repository = providers.Factory(UserRepository, session_factory=db.provided.session)

    identity_provider = providers.Singleton(MockGoogleIdentityProvider, demo_token=configs.MOCK_GOOGLE_TOKEN)

    import_engine = providers.Singleton(
        ImportStatusEngine,
        project_repository=project_repository,
        clone_delay=configs.IMPORT_CLONE_DELAY,
        setup_delay=configs.IMPORT_SETUP_DELAY,
        ready_delay=configs.IMPORT_READY_DELAY,
        result_url_template=configs.IMPORT_RESULT_URL_TEMPLATE,
    )

    user_service = providers.Factory(
        UserService,
        user_repository=user_repository,
        identity_provider=identity_provider,
    )

    project_service = providers.Factory(
        ProjectService,
        project_repository=project_repository,
        import_engine=import_engine,
    )
