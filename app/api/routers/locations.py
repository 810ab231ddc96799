"""
사용자 위치 API 라우터
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_location_service, unwrap_result
from app.api.schemas import LocationUpdateRequest, LocationUpdateResponse
from app.services.location_service import LocationService

router = APIRouter()


@router.put("/{user_id}/location", response_model=LocationUpdateResponse)
def update_user_location(
    user_id: int,
    request: LocationUpdateRequest,
    service: LocationService = Depends(get_location_service),
):
    """좌표를 주소로 변환하여 사용자 위치 정보 갱신"""
    result = service.update_location(user_id, request.latitude, request.longitude)
    data = unwrap_result(result)
    return LocationUpdateResponse(message=result.message, data=data)
