import os
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Configs(BaseSettings):

    PROJECT_ROOT: str = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "repo-importer")

    API: str = "/api"

    # date
    DATETIME_FORMAT: str = "%Y-%m-%dT%H:%M:%S"
    DATE_FORMAT: str = "%Y-%m-%d"

    # logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # database
    DB_USER: str = os.getenv("DB_USER", "postgres")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "admin")
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: str = os.getenv("DB_PORT", "5432")
    DB_ENGINE: str = os.getenv("DB_ENGINE", "postgresql")
    DB_DATABASE: str = os.getenv("DB_DATABASE", "repo_importer")
    DB_ECHO: bool = os.getenv("DB_ECHO", "false").lower() == "true"

    DATABASE_URI_FORMAT: str = "{db_engine}://{user}:{password}@{host}:{port}/{database}"

    # DATABASE_URI wins when set, e.g. sqlite:///./repo_importer.db
    DATABASE_URI: str = os.getenv("DATABASE_URI") or DATABASE_URI_FORMAT.format(
        db_engine=DB_ENGINE,
        user=DB_USER,
        password=DB_PASSWORD,
        host=DB_HOST,
        port=DB_PORT,
        database=DB_DATABASE,
    )

    # import pipeline, delays in seconds, each measured from the previous stage
    IMPORT_CLONE_DELAY: float = float(os.getenv("IMPORT_CLONE_DELAY", "1.0"))
    IMPORT_SETUP_DELAY: float = float(os.getenv("IMPORT_SETUP_DELAY", "2.0"))
    IMPORT_READY_DELAY: float = float(os.getenv("IMPORT_READY_DELAY", "2.0"))
    IMPORT_RESULT_URL_TEMPLATE: str = os.getenv(
        "IMPORT_RESULT_URL_TEMPLATE", "https://replit.com/@user/{name}"
    )

    # identity provider (mocked Google sign-in)
    MOCK_GOOGLE_TOKEN: str = os.getenv("MOCK_GOOGLE_TOKEN", "mock_google_token")

    # client side poller
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8080")
    POLL_INTERVAL: float = float(os.getenv("POLL_INTERVAL", "5.0"))
    SESSION_CACHE_PATH: str = os.getenv(
        "SESSION_CACHE_PATH",
        os.path.join(os.path.expanduser("~"), ".repo-importer", "session.json"),
    )

    class Config:
        case_sensitive = True


configs = Configs()
