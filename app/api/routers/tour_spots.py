"""
여행지 조회 API 라우터
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_tour_spot_service, unwrap_result
from app.api.schemas import TourSpotResponse
from app.services.tour_spot_service import TourSpotService

router = APIRouter()


@router.get("", response_model=List[TourSpotResponse])
def list_tour_spots(service: TourSpotService = Depends(get_tour_spot_service)):
    """모든 여행지와 태그 목록"""
    return unwrap_result(service.list_all_with_tags())


@router.get("/search", response_model=List[TourSpotResponse])
def search_tour_spots(
    keyword: str = Query("", description="제목 또는 태그 이름에 포함된 검색어"),
    service: TourSpotService = Depends(get_tour_spot_service),
):
    """검색어로 여행지 검색 (대소문자 구분)"""
    return unwrap_result(service.search_by_keyword(keyword))


@router.get("/area/{area_code}", response_model=List[TourSpotResponse])
def list_tour_spots_by_area(
    area_code: str, service: TourSpotService = Depends(get_tour_spot_service)
):
    """지역 코드별 여행지 목록"""
    return unwrap_result(service.find_by_area_code(area_code))
