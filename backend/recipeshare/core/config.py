# 환경변수 로딩 (.env)
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    MONGO_URI: str = "mongodb://localhost:27017"  # 필요 시 prod/staging로 분리
    MONGO_DB: str = "recipeshare"
    DB_INIT_RETRIES: int = 20  # 1초 간격

    # 인증은 아직 목업 — 작성자 미지정 시 고정 문자열
    DEFAULT_AUTHOR: str = "mock-user-id"
    DEFAULT_CREATED_BY: str = "system"

    # 재료 i18n 허용 언어 (검색 시 전체 언어 OR 대상)
    I18N_LANGUAGES: List[str] = ["fr", "en", "es", "de", "it"]

    PAGE_LIMIT_DEFAULT: int = 10
    PAGE_LIMIT_MAX: int = 100

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8081",  # expo dev
    ]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
