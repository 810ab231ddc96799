"""
여행지 조회 서비스

여행지 목록, 지역별 조회, 검색어(제목 또는 태그명) 검색을 제공합니다.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from app.core.database_manager import DatabaseManager, get_db_manager
from app.core.error_handling import ValidationError, service_operation
from app.models import Tag, TourSpot, TourSpotTag
from config.constants import MESSAGES

_WITH_TAGS = selectinload(TourSpot.tour_spot_tags).selectinload(TourSpotTag.tag)


def keyword_condition(keyword: str):
    """제목 또는 태그 이름 부분 일치 조건 (LIKE 특수문자는 이스케이프)"""
    return or_(
        TourSpot.title.contains(keyword, autoescape=True),
        Tag.name.contains(keyword, autoescape=True),
    )


class TourSpotService:
    """여행지 조회 서비스"""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        self.db_manager = db_manager or get_db_manager()
        self.logger = logging.getLogger(self.__class__.__name__)

    @service_operation("여행지 전체 조회", MESSAGES["search_failed"])
    def list_all_with_tags(self) -> List[Dict]:
        """모든 여행지와 태그 이름 목록"""
        with self.db_manager.get_session() as session:
            spots = session.query(TourSpot).options(_WITH_TAGS).order_by(TourSpot.id).all()
            return [spot.to_dict() for spot in spots]

    @service_operation("지역별 여행지 조회", MESSAGES["search_failed"])
    def find_by_area_code(self, area_code: str) -> List[Dict]:
        """지역 코드로 여행지 조회"""
        with self.db_manager.get_session() as session:
            spots = (
                session.query(TourSpot)
                .options(_WITH_TAGS)
                .filter(TourSpot.area_code == str(area_code))
                .order_by(TourSpot.id)
                .all()
            )
            return [spot.to_dict() for spot in spots]

    @service_operation("여행지 검색", MESSAGES["spot_not_found"])
    def search_by_keyword(self, keyword: str) -> List[Dict]:
        """제목 또는 태그 이름에 검색어가 포함된 여행지 검색 (대소문자 구분)"""
        if keyword is None or not keyword.strip():
            raise ValidationError(
                "빈 검색어",
                field_name="keyword",
                user_message=MESSAGES["invalid_keyword"],
            )

        with self.db_manager.get_session() as session:
            spot_ids = (
                select(TourSpot.id)
                .outerjoin(TourSpotTag, TourSpotTag.tour_spot_id == TourSpot.id)
                .outerjoin(Tag, Tag.id == TourSpotTag.tag_id)
                .where(keyword_condition(keyword))
            )
            spots = (
                session.query(TourSpot)
                .options(_WITH_TAGS)
                .filter(TourSpot.id.in_(spot_ids))
                .order_by(TourSpot.id)
                .all()
            )
            # SQLite의 LIKE는 대소문자를 구분하지 않으므로 한 번 더 거름
            return [
                spot.to_dict()
                for spot in spots
                if keyword in (spot.title or "")
                or any(keyword in name for name in spot.tag_names)
            ]
