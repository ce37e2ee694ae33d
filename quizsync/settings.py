# quizsync/settings.py
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 30.0   # seconds per HTTP call
DEFAULT_USER_DELAY = 1.0
DEFAULT_QUESTION_DELAY = 0.3


class Settings(BaseModel):
    """Everything a run needs to know about the outside world.

    Built once in the CLI and passed down explicitly; nothing below the CLI
    reads the environment.
    """
    api_base_url: str = DEFAULT_API_BASE_URL
    access_key: Optional[str] = None
    users_path: Path = Path("users.json")
    questions_path: Path = Path("data.json")
    timeout: float = DEFAULT_TIMEOUT
    user_delay: float = DEFAULT_USER_DELAY
    question_delay: float = DEFAULT_QUESTION_DELAY
    log_level: str = "INFO"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Read settings from the environment (after loading a .env file if present).
    Unset variables fall back to the model defaults.
    """
    load_dotenv(env_file)
    env = {
        "api_base_url": os.getenv("API_BASE_URL"),
        "access_key": os.getenv("ACCESS_KEY"),
        "users_path": os.getenv("USERS_PATH"),
        "questions_path": os.getenv("QUESTIONS_PATH"),
        "timeout": os.getenv("REQUEST_TIMEOUT"),
        "user_delay": os.getenv("USER_DELAY"),
        "question_delay": os.getenv("QUESTION_DELAY"),
        "log_level": os.getenv("LOG_LEVEL"),
    }
    return Settings(**{k: v for k, v in env.items() if v not in (None, "")})
