"""
사용자 위치 정보 서비스

좌표를 카카오 API로 주소 변환한 뒤 사용자당 하나의 위치 정보를 생성/갱신합니다.
"""

import logging
from typing import Optional

from app.collectors.kakao_geocoder import KakaoGeocodingClient
from app.core.database_manager import DatabaseManager, get_db_manager
from app.core.error_handling import (
    NotFoundError,
    ServiceResult,
    ValidationError,
    service_operation,
)
from app.models import Location, User
from config.constants import MESSAGES


def validate_coordinates(latitude, longitude) -> None:
    """위도(-90~90), 경도(-180~180) 범위 검증"""
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise ValidationError(
            f"숫자가 아닌 좌표: ({latitude}, {longitude})",
            field_name="latitude/longitude",
            user_message=MESSAGES["invalid_coordinates"],
        )
    if not -90.0 <= lat <= 90.0:
        raise ValidationError(
            f"위도 범위 초과: {lat}",
            field_name="latitude",
            field_value=lat,
            user_message=MESSAGES["invalid_coordinates"],
        )
    if not -180.0 <= lon <= 180.0:
        raise ValidationError(
            f"경도 범위 초과: {lon}",
            field_name="longitude",
            field_value=lon,
            user_message=MESSAGES["invalid_coordinates"],
        )


class LocationService:
    """사용자 위치 정보 서비스"""

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        geocoder: Optional[KakaoGeocodingClient] = None,
    ):
        self.db_manager = db_manager or get_db_manager()
        self.geocoder = geocoder or KakaoGeocodingClient()
        self.logger = logging.getLogger(self.__class__.__name__)

    @service_operation("사용자 위치 업데이트", MESSAGES["location_failed"])
    def update_location(
        self, user_id: int, latitude: float, longitude: float
    ) -> ServiceResult:
        """사용자 위치 정보 업데이트

        실패해도 예외를 던지지 않고 실패 ``ServiceResult`` 를 반환합니다.
        """
        validate_coordinates(latitude, longitude)
        latitude, longitude = float(latitude), float(longitude)

        with self.db_manager.get_session() as session:
            if session.get(User, user_id) is None:
                raise NotFoundError(
                    f"사용자 없음: {user_id}",
                    resource="users",
                    user_message=MESSAGES["user_not_found"],
                )

        # 외부 API 호출 동안 트랜잭션을 열어두지 않음
        address = self.geocoder.coord_to_address(latitude, longitude)

        with self.db_manager.get_session() as session:
            location = (
                session.query(Location).filter(Location.user_id == user_id).one_or_none()
            )
            if location is None:
                location = Location(user_id=user_id)
                session.add(location)
                self.logger.info(f"사용자 위치 정보 생성: user_id={user_id}")

            location.latitude = latitude
            location.longitude = longitude
            for field_name, value in address.items():
                setattr(location, field_name, value)

        return ServiceResult.ok(
            {"latitude": latitude, "longitude": longitude, **address},
            message=MESSAGES["location_applied"],
        )
