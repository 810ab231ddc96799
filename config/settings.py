"""
애플리케이션 설정 관리 모듈

환경 변수와 설정 값들을 중앙에서 관리합니다.
각 컴포넌트는 생성 시점에 설정 객체를 주입받으며, 실행 도중 환경 변수를 직접 읽지 않습니다.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# 환경 변수 로드
load_dotenv()


@dataclass
class DatabaseConfig:
    """데이터베이스 설정"""

    host: str
    user: str
    password: str
    database: str
    port: int = 5432
    url: Optional[str] = None
    echo: bool = False

    @property
    def sqlalchemy_url(self) -> str:
        """SQLAlchemy 연결 URL (DATABASE_URL 우선)"""
        if self.url:
            return self.url
        return (
            f"postgresql+psycopg2://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


@dataclass
class KakaoAPIConfig:
    """카카오 로컬(좌표→주소 변환) API 설정"""

    api_key: str
    base_url: str = "https://dapi.kakao.com"
    timeout: int = 10
    retry_count: int = 3


@dataclass
class ScraperConfig:
    """검색 엔진 태그 스크래퍼 설정"""

    search_url: str = (
        "https://search.naver.com/search.naver?ssc=tab.blog.all&query={keyword}"
    )
    result_selector: str = "div.view_wrap"
    title_selector: str = "a.title_link"
    tag_selector: str = "div.spblog_tag a, span.txt_tag"
    headless: bool = True
    page_load_timeout: int = 20
    max_results: int = 10
    driver_path: str = ""


@dataclass
class EnrichmentConfig:
    """태그 보강 작업 설정"""

    page_size: int = 100
    max_attempts: int = 3
    retry_delay: float = 2.0
    schedule: str = ""  # cron 표현식, 비어 있으면 스케줄 비활성화


@dataclass
class SeedDataConfig:
    """시드 JSON 데이터 설정"""

    data_dir: str = "data"
    area_file: str = "area-data.json"
    tour_spot_prefix: str = "areaBasedList"
    tour_spot_suffix: str = ".json"


@dataclass
class LoggingConfig:
    """로깅 설정"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_prefix: str = "travel_planner"
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5
    log_dir: str = "logs"


@dataclass
class AppSettings:
    """전체 애플리케이션 설정"""

    debug: bool
    environment: str
    database: DatabaseConfig
    kakao: KakaoAPIConfig
    scraper: ScraperConfig
    enrichment: EnrichmentConfig
    seed_data: SeedDataConfig
    logging: LoggingConfig


def _get_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def get_database_config() -> DatabaseConfig:
    """데이터베이스 설정 조회"""
    return DatabaseConfig(
        host=os.getenv("DB_HOST", "localhost"),
        user=os.getenv("DB_USER", "postgres"),
        password=os.getenv("DB_PASSWORD", ""),
        database=os.getenv("DB_NAME", "travel_planner"),
        port=int(os.getenv("DB_PORT", "5432")),
        url=os.getenv("DATABASE_URL") or None,
        echo=_get_bool("DB_ECHO", "false"),
    )


def get_kakao_api_config() -> KakaoAPIConfig:
    """카카오 API 설정 조회"""
    return KakaoAPIConfig(
        api_key=os.getenv("KAKAO_API_KEY", ""),
        base_url=os.getenv("KAKAO_API_BASE_URL", "https://dapi.kakao.com"),
        timeout=int(os.getenv("KAKAO_API_TIMEOUT", "10")),
        retry_count=int(os.getenv("KAKAO_API_RETRY_COUNT", "3")),
    )


def get_scraper_config() -> ScraperConfig:
    """스크래퍼 설정 조회"""
    defaults = ScraperConfig()
    return ScraperConfig(
        search_url=os.getenv("SCRAPER_SEARCH_URL", defaults.search_url),
        result_selector=os.getenv("SCRAPER_RESULT_SELECTOR", defaults.result_selector),
        title_selector=os.getenv("SCRAPER_TITLE_SELECTOR", defaults.title_selector),
        tag_selector=os.getenv("SCRAPER_TAG_SELECTOR", defaults.tag_selector),
        headless=_get_bool("SCRAPER_HEADLESS", "true"),
        page_load_timeout=int(os.getenv("SCRAPER_PAGE_LOAD_TIMEOUT", "20")),
        max_results=int(os.getenv("SCRAPER_MAX_RESULTS", "10")),
        driver_path=os.getenv("CHROME_DRIVER_PATH", ""),
    )


def get_enrichment_config() -> EnrichmentConfig:
    """태그 보강 작업 설정 조회"""
    return EnrichmentConfig(
        page_size=int(os.getenv("ENRICHMENT_PAGE_SIZE", "100")),
        max_attempts=int(os.getenv("ENRICHMENT_MAX_ATTEMPTS", "3")),
        retry_delay=float(os.getenv("ENRICHMENT_RETRY_DELAY", "2.0")),
        schedule=os.getenv("ENRICHMENT_SCHEDULE", ""),
    )


def get_seed_data_config() -> SeedDataConfig:
    """시드 데이터 설정 조회"""
    return SeedDataConfig(
        data_dir=os.getenv("SEED_DATA_DIR", "data"),
        area_file=os.getenv("AREA_DATA_FILE", "area-data.json"),
        tour_spot_prefix=os.getenv("TOUR_SPOT_FILE_PREFIX", "areaBasedList"),
        tour_spot_suffix=os.getenv("TOUR_SPOT_FILE_SUFFIX", ".json"),
    )


def get_logging_config() -> LoggingConfig:
    """로깅 설정 조회"""
    return LoggingConfig(
        level=os.getenv("LOG_LEVEL", "INFO"),
        format=os.getenv(
            "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        ),
        file_prefix=os.getenv("LOG_FILE_PREFIX", "travel_planner"),
        max_bytes=int(os.getenv("LOG_MAX_BYTES", "10485760")),
        backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
        log_dir=os.getenv("LOG_DIR", "logs"),
    )


def get_app_settings() -> AppSettings:
    """전체 애플리케이션 설정 조회"""
    return AppSettings(
        debug=_get_bool("DEBUG", "False"),
        environment=os.getenv("ENVIRONMENT", "development"),
        database=get_database_config(),
        kakao=get_kakao_api_config(),
        scraper=get_scraper_config(),
        enrichment=get_enrichment_config(),
        seed_data=get_seed_data_config(),
        logging=get_logging_config(),
    )
