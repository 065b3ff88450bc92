"""Configuration management for the calculator."""
import logging
import os

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, field_validator

DEFAULT_HISTORY_FILE = os.path.expanduser("~/.chaincalc_history")


class Settings(BaseModel):
    """Settings read from the environment (and a local .env file)."""
    history_file: str = DEFAULT_HISTORY_FILE
    log_level: str = "WARNING"
    prompt: str = "> "

    @field_validator('history_file')
    @classmethod
    def expand_history_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('History file cannot be empty')
        return os.path.expanduser(v.strip())

    @field_validator('log_level')
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f'Unknown log level: {v}')
        return level


def load_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))
    return Settings(
        history_file=os.getenv("CHAINCALC_HISTORY_FILE", DEFAULT_HISTORY_FILE),
        log_level=os.getenv("CHAINCALC_LOG_LEVEL", "WARNING"),
        prompt=os.getenv("CHAINCALC_PROMPT", "> "),
    )
