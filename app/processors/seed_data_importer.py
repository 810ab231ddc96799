"""
시드 데이터 가져오기 모듈

한국관광공사 지역 코드 파일과 지역기반 관광정보(areaBasedList*.json) 파일을 읽어
데이터베이스에 저장합니다. 이미 존재하는 항목(자연 키 기준)은 건너뛰며 갱신하지 않습니다.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.database_manager import DatabaseManager, get_db_manager
from app.core.error_handling import PersistenceError, ServiceResult, service_operation
from app.models import Area, TourSpot
from config.constants import AREA_CODES, KTO_DATETIME_FORMAT, MESSAGES
from config.settings import SeedDataConfig, get_seed_data_config

# KTO 응답 필드 → tour_spots 컬럼
TOUR_SPOT_FIELDS = {
    "contentid": "content_id",
    "contenttypeid": "content_type_id",
    "title": "title",
    "addr1": "addr1",
    "addr2": "addr2",
    "zipcode": "zipcode",
    "tel": "tel",
    "areacode": "area_code",
    "sigungucode": "sigungu_code",
    "cat1": "cat1",
    "cat2": "cat2",
    "cat3": "cat3",
    "mapx": "map_x",
    "mapy": "map_y",
    "mlevel": "mlevel",
    "firstimage": "first_image",
    "firstimage2": "first_image2",
    "cpyrhtDivCd": "cpyrht_div_cd",
    "booktour": "book_tour",
    "createdtime": "created_time",
    "modifiedtime": "modified_time",
}

AREA_NAMES = {code: name for name, code in AREA_CODES.items()}
FLOAT_COLUMNS = {"map_x", "map_y"}
DATETIME_COLUMNS = {"created_time", "modified_time"}


def parse_float(value: Any) -> Optional[float]:
    """좌표 문자열을 실수로 변환. 변환할 수 없으면 None"""
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_kto_datetime(value: Any) -> Optional[datetime]:
    """KTO 타임스탬프(yyyyMMddHHmmss) 변환. 변환할 수 없으면 None"""
    if not value:
        return None
    try:
        return datetime.strptime(str(value), KTO_DATETIME_FORMAT)
    except ValueError:
        return None


def map_tour_spot_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """KTO 항목을 TourSpot 컬럼 딕셔너리로 변환"""
    mapped = {}
    for source_field, column in TOUR_SPOT_FIELDS.items():
        value = item.get(source_field)
        if column in FLOAT_COLUMNS:
            value = parse_float(value)
        elif column in DATETIME_COLUMNS:
            value = parse_kto_datetime(value)
        elif value is not None:
            value = str(value)
        mapped[column] = value
    if mapped["title"] is None:
        mapped["title"] = ""
    return mapped


def extract_items(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    """KTO 응답 봉투(response.body.items.item)에서 항목 목록 추출"""
    try:
        items = payload["response"]["body"]["items"]
    except (KeyError, TypeError) as e:
        raise ValueError(f"KTO 응답 형식이 아닙니다: {e}") from e
    if not items:
        # 결과가 없으면 items가 빈 문자열로 내려옴
        return []
    item = items.get("item", [])
    if isinstance(item, dict):
        return [item]
    return list(item or [])


class SeedDataImporter:
    """시드 JSON 데이터 가져오기"""

    def __init__(
        self,
        config: Optional[SeedDataConfig] = None,
        db_manager: Optional[DatabaseManager] = None,
    ):
        self.config = config or get_seed_data_config()
        self.db_manager = db_manager or get_db_manager()
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def data_dir(self) -> Path:
        return Path(self.config.data_dir)

    def _read_json(self, path: Path) -> Any:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def tour_spot_files(self) -> List[Path]:
        """이름 규칙에 맞는 관광정보 파일 목록 (이름순)"""
        if not self.data_dir.is_dir():
            raise PersistenceError(f"시드 데이터 디렉터리가 없습니다: {self.data_dir}")
        return sorted(
            path
            for path in self.data_dir.iterdir()
            if path.is_file()
            and path.name.startswith(self.config.tour_spot_prefix)
            and path.name.endswith(self.config.tour_spot_suffix)
        )

    @service_operation("지역 데이터 가져오기", MESSAGES["import_failed"])
    def import_areas(self) -> ServiceResult:
        """지역 코드 파일 가져오기"""
        path = self.data_dir / self.config.area_file
        records = self._read_json(path)
        if not isinstance(records, list):
            raise ValueError(f"지역 데이터는 배열이어야 합니다: {path}")

        stats = {"inserted": 0, "skipped": 0, "invalid": 0, "files": 1}
        with self.db_manager.get_session() as session:
            for record in records:
                area_code = record.get("areaCode") if isinstance(record, dict) else None
                if area_code in (None, ""):
                    stats["invalid"] += 1
                    continue
                area_code = str(area_code)
                if session.query(Area.id).filter_by(area_code=area_code).first():
                    stats["skipped"] += 1
                    continue
                area = Area(
                    area_code=area_code,
                    area_name=record.get("areaName")
                    or record.get("name")
                    or AREA_NAMES.get(area_code),
                )
                stats[self._insert(session, area)] += 1

        self.logger.info(
            f"지역 데이터 가져오기 완료: 추가 {stats['inserted']}, "
            f"기존 {stats['skipped']}, 무효 {stats['invalid']}"
        )
        return ServiceResult.ok(stats, message=MESSAGES["import_success"])

    @service_operation("관광지 데이터 가져오기", MESSAGES["import_failed"])
    def import_tour_spots(self) -> ServiceResult:
        """관광정보 파일들 가져오기"""
        stats = {"inserted": 0, "skipped": 0, "invalid": 0, "files": 0}
        with self.db_manager.get_session() as session:
            for path in self.tour_spot_files():
                items = extract_items(self._read_json(path))
                stats["files"] += 1
                self.logger.info(f"관광지 파일 처리: {path.name} ({len(items)}건)")
                for item in items:
                    content_id = item.get("contentid") if isinstance(item, dict) else None
                    if content_id in (None, ""):
                        stats["invalid"] += 1
                        continue
                    exists = (
                        session.query(TourSpot.id)
                        .filter_by(content_id=str(content_id))
                        .first()
                    )
                    if exists:
                        stats["skipped"] += 1
                        continue
                    spot = TourSpot(**map_tour_spot_item(item))
                    stats[self._insert(session, spot)] += 1

        self.logger.info(
            f"관광지 데이터 가져오기 완료: 파일 {stats['files']}, 추가 {stats['inserted']}, "
            f"기존 {stats['skipped']}, 무효 {stats['invalid']}"
        )
        return ServiceResult.ok(stats, message=MESSAGES["import_success"])

    def _insert(self, session: Session, entity) -> str:
        """SAVEPOINT 안에서 삽입. 자연 키 충돌(동시 가져오기)은 건너뜀으로 처리"""
        try:
            with session.begin_nested():
                session.add(entity)
        except IntegrityError:
            self.logger.info(f"이미 존재하는 항목 건너뜀: {entity!r}")
            return "skipped"
        return "inserted"
