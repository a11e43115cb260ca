from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    gemini_api_key: str = ""
    openrouter_api_key: str = ""
    llm_provider: Literal["gemini", "openrouter"] = "gemini"
    gemini_model: str = "gemini-2.0-flash"
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta/models"
    llm_model: str = "google/gemini-2.0-flash-exp"
    request_timeout: float = 30.0
    telegram_bot_token: str = ""
    db_path: str = "clearbudget.json"
    product_name: str = "ClearBudget"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
