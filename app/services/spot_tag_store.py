"""
여행지-태그 연결 저장소

여행지와 태그의 다대다 연결을 여행지 단위로 재구성합니다.
"""

import logging
from typing import Iterable, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.error_handling import PersistenceError
from app.models import Tag, TourSpot, TourSpotTag


class SpotTagLinkStore:
    """여행지-태그 연결 저장소 (세션 단위)"""

    def __init__(self, session: Session):
        self.session = session
        self.logger = logging.getLogger(self.__class__.__name__)

    def delete_all_for_spot(self, spot_id: int) -> int:
        """여행지의 모든 태그 연결 삭제. 삭제된 행 수 반환"""
        try:
            deleted = (
                self.session.query(TourSpotTag)
                .filter(TourSpotTag.tour_spot_id == spot_id)
                .delete(synchronize_session=False)
            )
            self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"태그 연결 삭제 실패: tour_spot_id={spot_id}",
                table_name="tour_spot_tags",
                cause=e,
            ) from e
        return deleted

    def save_all(self, associations: Iterable[TourSpotTag]) -> int:
        """태그 연결 일괄 저장"""
        associations = list(associations)
        if not associations:
            return 0
        try:
            self.session.add_all(associations)
            self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(
                "태그 연결 저장 실패", table_name="tour_spot_tags", cause=e
            ) from e
        return len(associations)

    def lock_spot(self, spot_id: int) -> TourSpot:
        """여행지 행 잠금 (지원하는 DB에서 SELECT ... FOR UPDATE)"""
        try:
            return (
                self.session.query(TourSpot)
                .filter(TourSpot.id == spot_id)
                .with_for_update()
                .one()
            )
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"여행지 잠금 실패: id={spot_id}", table_name="tour_spots", cause=e
            ) from e

    def replace_for_spot(self, spot: TourSpot, tags: Iterable[Tag]) -> List[TourSpotTag]:
        """여행지의 태그 집합을 주어진 태그들로 교체

        같은 태그가 여러 번 주어져도 연결은 하나만 생성합니다.
        트랜잭션 경계는 호출자의 세션이 결정합니다.
        """
        self.lock_spot(spot.id)
        self.delete_all_for_spot(spot.id)

        seen_tag_ids = set()
        associations = []
        for tag in tags:
            if tag.id in seen_tag_ids:
                continue
            seen_tag_ids.add(tag.id)
            associations.append(TourSpotTag(tour_spot_id=spot.id, tag_id=tag.id))

        self.save_all(associations)
        self.session.expire(spot, ["tour_spot_tags"])
        return associations

    def tag_names_for_spot(self, spot_id: int) -> List[str]:
        """여행지의 현재 태그 이름 목록"""
        rows = (
            self.session.query(Tag.name)
            .join(TourSpotTag, TourSpotTag.tag_id == Tag.id)
            .filter(TourSpotTag.tour_spot_id == spot_id)
            .order_by(TourSpotTag.id)
            .all()
        )
        return [name for (name,) in rows]
