"""
데이터베이스 모델 정의
여행 플래너 백엔드에서 사용하는 SQLAlchemy ORM 모델들

각 모델의 주석에는 다음과 같은 정보가 포함됩니다:
- 설명: 테이블의 용도와 주요 기능
- 생명주기: 행이 생성/갱신/삭제되는 시점
"""

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

TAG_NAME_MAX_LENGTH = 100


# ===========================================
# 사용자 및 위치 관련 테이블
# ===========================================


class User(Base):
    """
    사용자 정보 테이블
    설명: 위치 정보와 연결되는 최소한의 사용자 계정 정보
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True)
    nickname = Column(String, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    location = relationship(
        "Location", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )


class Location(Base):
    """
    사용자 위치 정보 테이블
    설명: 사용자별 최신 좌표와 카카오 좌표→주소 변환 결과
    생명주기: 최초 위치 갱신 시 생성, 이후 같은 행을 덮어씀 (사용자당 1행)
    """

    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address_name = Column(String)
    region_1depth_name = Column(String)  # 시/도
    region_2depth_name = Column(String)  # 시/군/구
    region_3depth_name = Column(String)  # 읍/면/동
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="location")


# ===========================================
# 관광 정보 테이블
# ===========================================


class Area(Base):
    """
    지역 코드 테이블
    설명: 한국관광공사 지역 코드 (areaCode)
    생명주기: 시드 데이터 가져오기에서 1회 생성, 이후 변경/삭제 없음
    """

    __tablename__ = "areas"

    id = Column(Integer, primary_key=True, index=True)
    area_code = Column(String(10), unique=True, index=True, nullable=False)
    area_name = Column(String(50))
    created_at = Column(DateTime, server_default=func.now())


class TourSpot(Base):
    """
    관광지 정보 테이블
    설명: 한국관광공사 지역기반 관광정보(areaBasedList) 항목
    생명주기: 시드 데이터 가져오기에서 contentid 기준 1회 생성 (재가져오기 시 갱신 없음)
    """

    __tablename__ = "tour_spots"

    id = Column(Integer, primary_key=True, index=True)
    content_id = Column(String(20), unique=True, index=True, nullable=False)
    content_type_id = Column(String(10))
    title = Column(String, nullable=False, default="")
    addr1 = Column(String)
    addr2 = Column(String)
    zipcode = Column(String(10))
    tel = Column(String)
    area_code = Column(String(10), index=True)
    sigungu_code = Column(String(10))
    cat1 = Column(String(10))  # 대분류
    cat2 = Column(String(10))  # 중분류
    cat3 = Column(String(20))  # 소분류
    map_x = Column(Float)  # 경도
    map_y = Column(Float)  # 위도
    mlevel = Column(String(5))
    first_image = Column(String)
    first_image2 = Column(String)
    cpyrht_div_cd = Column(String(10))
    book_tour = Column(String(5))
    created_time = Column(DateTime)
    modified_time = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())

    tour_spot_tags = relationship(
        "TourSpotTag", back_populates="tour_spot", cascade="all, delete-orphan"
    )

    @property
    def tag_names(self):
        return [link.tag.name for link in self.tour_spot_tags]

    def to_dict(self, include_tags: bool = True) -> dict:
        data = {
            column.name: getattr(self, column.name) for column in self.__table__.columns
        }
        if include_tags:
            data["tag_names"] = self.tag_names
        return data


class Tag(Base):
    """
    태그 테이블
    설명: 여행지에 붙는 짧은 설명 라벨, 모든 여행지가 공유
    생명주기: 태그 보강 중 처음 등장한 이름으로 생성, 삭제 없음
    """

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(TAG_NAME_MAX_LENGTH), unique=True, index=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    tour_spot_tags = relationship("TourSpotTag", back_populates="tag")

    def __repr__(self):
        return f"<Tag(id={self.id}, name={self.name})>"


class TourSpotTag(Base):
    """
    여행지-태그 연결 테이블
    설명: 여행지의 현재 태그 집합 (이력 없음)
    생명주기: 태그 보강 시 여행지 단위로 전체 삭제 후 재생성
    """

    __tablename__ = "tour_spot_tags"
    __table_args__ = (
        UniqueConstraint("tour_spot_id", "tag_id", name="uq_tour_spot_tag"),
    )

    id = Column(Integer, primary_key=True, index=True)
    tour_spot_id = Column(
        Integer, ForeignKey("tour_spots.id", ondelete="CASCADE"), nullable=False
    )
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), nullable=False)

    tour_spot = relationship("TourSpot", back_populates="tour_spot_tags")
    tag = relationship("Tag", back_populates="tour_spot_tags")
