"""
태그 저장소

태그 이름(고유) → 태그 엔티티 매핑을 관리합니다.
태그 이름은 앞뒤 공백 제거 및 연속 공백 축약 후 대소문자를 구분하여 비교합니다.
"""

import logging
import re
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.error_handling import PersistenceError
from app.models import TAG_NAME_MAX_LENGTH, Tag

_WHITESPACE = re.compile(r"\s+")


def normalize_tag_name(name: Optional[str]) -> Optional[str]:
    """태그 이름 정규화 (공백만 정리, 대소문자 유지)

    빈 이름과 컬럼 길이를 넘는 이름은 None
    """
    if name is None:
        return None
    normalized = _WHITESPACE.sub(" ", str(name)).strip()
    if len(normalized) > TAG_NAME_MAX_LENGTH:
        return None
    return normalized or None


class TagStore:
    """태그 저장소 (세션 단위)"""

    def __init__(self, session: Session):
        self.session = session
        self.logger = logging.getLogger(self.__class__.__name__)

    def find_by_name(self, name: str) -> Optional[Tag]:
        """이름이 정확히 일치하는 태그 조회"""
        try:
            return self.session.query(Tag).filter(Tag.name == name).one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"태그 조회 실패: {name}", table_name="tags", cause=e
            ) from e

    def create(self, name: str) -> Tag:
        """새 태그 생성 (호출자가 미존재를 확인한 상태여야 함)"""
        tag = Tag(name=name)
        try:
            self.session.add(tag)
            self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"태그 생성 실패: {name}", table_name="tags", cause=e
            ) from e
        return tag

    def get_or_create(self, name: str) -> Tuple[Tag, bool]:
        """태그 조회 후 없으면 생성

        고유 제약 위반(동시 생성)이 발생하면 SAVEPOINT만 롤백하고 먼저 생성된 태그를 다시 읽습니다.

        Returns:
            (태그, 새로 생성했는지 여부)
        """
        tag = self.find_by_name(name)
        if tag is not None:
            return tag, False

        try:
            with self.session.begin_nested():
                tag = Tag(name=name)
                self.session.add(tag)
        except IntegrityError:
            self.logger.info(f"태그 동시 생성 감지, 기존 태그 재조회: {name}")
            tag = self.find_by_name(name)
            if tag is None:
                raise PersistenceError(
                    f"태그 생성 충돌 후 재조회 실패: {name}", table_name="tags"
                )
            return tag, False
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"태그 생성 실패: {name}", table_name="tags", cause=e
            ) from e

        self.logger.debug(f"새 태그 생성: {name} (id={tag.id})")
        return tag, True
