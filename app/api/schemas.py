"""
Travel Planner API Pydantic 스키마
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# Request 스키마
class LocationUpdateRequest(BaseModel):
    """사용자 위치 업데이트 요청"""
    latitude: float
    longitude: float


# Response 스키마
class TourSpotResponse(BaseModel):
    """여행지 정보"""
    id: int
    content_id: str
    content_type_id: Optional[str] = None
    title: str
    addr1: Optional[str] = None
    addr2: Optional[str] = None
    zipcode: Optional[str] = None
    tel: Optional[str] = None
    area_code: Optional[str] = None
    sigungu_code: Optional[str] = None
    cat1: Optional[str] = None
    cat2: Optional[str] = None
    cat3: Optional[str] = None
    map_x: Optional[float] = None
    map_y: Optional[float] = None
    mlevel: Optional[str] = None
    first_image: Optional[str] = None
    first_image2: Optional[str] = None
    cpyrht_div_cd: Optional[str] = None
    book_tour: Optional[str] = None
    created_time: Optional[datetime] = None
    modified_time: Optional[datetime] = None
    created_at: Optional[datetime] = None
    tag_names: List[str] = Field(default_factory=list)


class LocationData(BaseModel):
    """적용된 위치 정보"""
    latitude: float
    longitude: float
    address_name: Optional[str] = None
    region_1depth_name: Optional[str] = None
    region_2depth_name: Optional[str] = None
    region_3depth_name: Optional[str] = None


class LocationUpdateResponse(BaseModel):
    """사용자 위치 업데이트 응답"""
    message: str
    data: LocationData


class ImportStats(BaseModel):
    """가져오기 통계"""
    inserted: int = 0
    skipped: int = 0
    invalid: int = 0
    files: int = 0


class ImportResponse(BaseModel):
    """시드 데이터 가져오기 응답"""
    message: str
    data: ImportStats


class BatchTriggerResponse(BaseModel):
    """배치 작업 실행 요청 응답"""
    job_type: str
    status: str
    message: str


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    service: str
    version: str
    scheduler: Dict[str, Any] = Field(default_factory=dict)
