from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()  # .env 파일 로드


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongo_url: str = "mongodb://localhost:27017"
    mongo_db_name: str = "planmate"
    store_backend: str = "mongo"  # mongo, memory

    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_hours: int = 24

    debug: bool = False
    cors_origins: List[str] = ["http://localhost:3000"]
    log_dir: str = ""


@lru_cache
def get_settings() -> Settings:
    """프로세스 전역 설정 (최초 1회 로드)"""
    return Settings()
