from pathlib import Path
from typing import Annotated, List

import orjson
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


def _split_csv(v: str | List[str]) -> List[str]:
    if isinstance(v, str) and v.startswith('['):
        return orjson.loads(v)
    if isinstance(v, str):
        return [i.strip() for i in v.split(',') if i.strip()]
    return list(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Gala Manager'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Database (SQLite, single writer)
    DATABASE_URL: str = 'sqlite+aiosqlite:///./gala.db'
    SQLITE_BUSY_TIMEOUT_MS: int = 1000
    DB_ECHO: bool = False

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []  # admin UI and registration page origins

    # Origins allowed to open the journal websocket (empty = any)
    WEBSOCKET_ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = []

    @field_validator('BACKEND_CORS_ORIGINS', 'WEBSOCKET_ALLOWED_ORIGINS', mode='before')
    @classmethod
    def assemble_origins(cls, v: str | List[str]) -> List[str]:
        return _split_csv(v)

    # Journal websocket timing (seconds)
    JOURNAL_PONG_WAIT: float = 60.0
    JOURNAL_PING_PERIOD: float = 54.0  # must be shorter than JOURNAL_PONG_WAIT
    JOURNAL_WRITE_WAIT: float = 10.0

    # Per-subscriber outbound buffer; a full buffer evicts the subscriber
    JOURNAL_SUBSCRIBER_BUFFER: int = 256

    # Item that represents the gala ticket
    REGISTRATION_ITEM_ID: int = 1


settings = Settings()  # type: ignore
