"""
Travel Planner API 설정
"""

import os
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """API 설정"""

    # 기본 설정
    SERVICE_NAME: str = "travel-planner"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # 서버 설정
    HOST: str = os.getenv("API_HOST", "0.0.0.0")
    PORT: int = int(os.getenv("API_PORT", "8080"))

    # 시작 시 태그 보강 스케줄러 실행 여부 (ENRICHMENT_SCHEDULE 필요)
    ENABLE_SCHEDULER: bool = os.getenv("ENABLE_SCHEDULER", "true").lower() == "true"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # 추가 환경 변수 무시


settings = Settings()
