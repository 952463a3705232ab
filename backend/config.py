"""
Runtime settings read from the environment (optionally a .env file).
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_PORT = 7540


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    db_file: str = "scheduler.db"
    web_dir: str = "web"
    log_level: str = "INFO"


def load_settings() -> Settings:
    load_dotenv()

    raw_port = os.getenv("TODO_PORT", "").strip()
    try:
        port = int(raw_port) if raw_port else DEFAULT_PORT
    except ValueError:
        raise ValueError(f"TODO_PORT must be an integer, got {raw_port!r}") from None

    return Settings(
        host=os.getenv("TODO_HOST") or Settings.host,
        port=port,
        db_file=os.getenv("TODO_DBFILE") or Settings.db_file,
        web_dir=os.getenv("TODO_WEBDIR") or Settings.web_dir,
        log_level=(os.getenv("TODO_LOG_LEVEL") or Settings.log_level).upper(),
    )
