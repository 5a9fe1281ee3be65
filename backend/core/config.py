import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _database_url_from_env() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    # Fall back to the discrete DB_* variables used by older deployments
    user = os.getenv("DB_USER", "user")
    password = os.getenv("DB_PASSWORD", "password")
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME", "inventory")
    return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{name}"


class Settings:
    def __init__(
        self,
        database_url: Optional[str] = None,
        database_echo: Optional[bool] = None,
        cache_dir: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        log_level: Optional[str] = None,
    ):
        self.database_url: str = database_url or _database_url_from_env()
        if database_echo is None:
            database_echo = os.getenv("DATABASE_ECHO", "False").lower() == "true"
        self.database_echo: bool = database_echo

        # Directory holding attachment files (the original "--cache" option)
        self.cache_dir: Optional[str] = cache_dir or os.getenv("CACHE_DIR") or None

        self.host: str = host or os.getenv("HOST", "0.0.0.0")
        self.port: int = int(port or os.getenv("PORT", "3000"))
        self.log_level: str = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()

    def __repr__(self) -> str:
        return f"Settings(cache_dir={self.cache_dir!r}, host={self.host!r}, port={self.port})"


settings = Settings()
