"""
API 의존성 제공자

테스트에서는 ``app.dependency_overrides`` 로 교체합니다.
"""

from typing import Any, Callable

from fastapi import HTTPException

from app.core.base_job import JobResult
from app.core.error_handling import ServiceResult, http_status_for
from app.processors.seed_data_importer import SeedDataImporter
from app.services.location_service import LocationService
from app.services.tour_spot_service import TourSpotService


def get_tour_spot_service() -> TourSpotService:
    return TourSpotService()


def get_location_service() -> LocationService:
    return LocationService()


def get_seed_data_importer() -> SeedDataImporter:
    return SeedDataImporter()


def get_enrichment_runner() -> Callable[[], JobResult]:
    from jobs.tourism.tag_enrichment_job import run_tag_enrichment

    return run_tag_enrichment


def unwrap_result(result: ServiceResult) -> Any:
    """성공이면 데이터 반환, 실패면 오류 카테고리에 맞는 HTTP 오류 발생"""
    if not result.success:
        raise HTTPException(status_code=http_status_for(result.category), detail=result.message)
    return result.data
