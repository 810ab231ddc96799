"""
상수 정의 모듈

애플리케이션에서 사용하는 상수들을 정의합니다.
"""

from enum import Enum


class JobType(Enum):
    """배치 작업 타입"""

    SEED_IMPORT = "seed_import"
    TAG_ENRICHMENT = "tag_enrichment"


class JobStatus(Enum):
    """작업 상태"""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "success"
    FAILED = "failure"
    SKIPPED = "skipped"


# 지역 이름 → 지역 코드
AREA_CODES = {
    "서울": "1",
    "인천": "2",
    "대전": "3",
    "대구": "4",
    "광주": "5",
    "부산": "6",
    "울산": "7",
    "세종": "8",
    "경기": "31",
    "강원": "32",
    "충북": "33",
    "충남": "34",
    "경북": "35",
    "경남": "36",
    "전북": "37",
    "전남": "38",
    "제주": "39",
}

# 사용자에게 노출되는 고정 메시지
MESSAGES = {
    "import_success": "데이터 추가 성공",
    "import_failed": "데이터 추가 실패",
    "location_applied": "사용자 위치정보가 적용되었습니다.",
    "location_failed": "사용자 위치정보를 업데이트하는데 실패했습니다.",
    "search_failed": "여행지 검색에 실패했습니다.",
    "spot_not_found": "여행지를 찾을수 없습니다.",
    "user_not_found": "사용자를 찾을 수 없습니다.",
    "invalid_coordinates": "위도/경도 값이 올바르지 않습니다.",
    "invalid_keyword": "검색어를 입력해주세요.",
    "enrichment_running": "태그 보강 작업이 이미 실행 중입니다.",
}

# KTO 타임스탬프 형식 (createdtime, modifiedtime)
KTO_DATETIME_FORMAT = "%Y%m%d%H%M%S"
