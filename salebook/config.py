import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings


# Find .env even in frozen or packaged mode
POSSIBLE_ENV_PATHS = [
    Path(__file__).resolve().parent.parent / ".env",        # normal
    Path(sys.executable).resolve().parent / ".env",         # frozen exe
    Path.cwd() / ".env",                                   # runtime cwd
]

for env_path in POSSIBLE_ENV_PATHS:
    if env_path.exists():
        load_dotenv(env_path, override=False)
        break


class Settings(BaseSettings):
    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: str = "5432"
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_NAME: str = "salebook_db"

    # Business clock (counters and "today" are computed in this zone)
    TIMEZONE: str = "Africa/Lagos"

    # Ledger posting
    TRANSACTION_MAX_ATTEMPTS: int = 5

    # Views
    RECENT_ACTIVITY_LIMIT: int = 10
    TOP_CLIENTS_LIMIT: int = 5

    # Logging
    LOG_FILE: Optional[str] = "salebook.log"
    LOG_LEVEL: str = "DEBUG"
    LOG_ROTATION: str = "500 MB"

    CORS_ORIGINS: List[str] = ["*"]

    # Server
    SERVER_IP: str = "127.0.0.1"
    SERVER_PORT: int = 8000

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )


settings = Settings()
