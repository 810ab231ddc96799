"""
카카오 로컬 API 클라이언트

좌표(위도/경도)를 행정 주소로 변환합니다 (coord2address).
"""

import time
from typing import Any, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from app.core.error_handling import ConfigurationError, UpstreamServiceError
from app.core.logger import get_logger, get_logger_instance
from config.settings import KakaoAPIConfig, get_kakao_api_config

COORD2ADDRESS_PATH = "/v2/local/geo/coord2address.json"
ADDRESS_FIELDS = (
    "address_name",
    "region_1depth_name",
    "region_2depth_name",
    "region_3depth_name",
)


def pick_address(document: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """지번 주소(address)를 우선 사용하고, 없을 때만 도로명 주소(road_address) 사용"""
    return document.get("address") or document.get("road_address")


class KakaoGeocodingClient:
    """카카오 좌표→주소 변환 클라이언트"""

    def __init__(self, config: Optional[KakaoAPIConfig] = None):
        self.config = config or get_kakao_api_config()
        self.logger = get_logger(__name__)
        self._setup_session()

    def _setup_session(self):
        """HTTP 세션 초기화"""
        self.session = requests.Session()
        self.session.headers.update(
            {"Authorization": f"KakaoAK {self.config.api_key}"}
        )

        # 재시도 전략 설정
        retry_strategy = Retry(
            total=self.config.retry_count,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            backoff_factor=1,
            respect_retry_after_header=True,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def coord_to_address(self, latitude: float, longitude: float) -> Dict[str, Any]:
        """좌표를 주소 정보로 변환

        Returns:
            address_name, region_1depth_name ~ region_3depth_name 을 담은 딕셔너리

        Raises:
            ConfigurationError: API 키 미설정
            UpstreamServiceError: 호출 실패 또는 사용할 수 있는 주소가 없음
        """
        if not self.config.api_key or not self.config.api_key.strip():
            raise ConfigurationError(
                "카카오 API 키가 설정되지 않았습니다.", config_key="KAKAO_API_KEY"
            )

        url = f"{self.config.base_url.rstrip('/')}{COORD2ADDRESS_PATH}"
        params = {"x": longitude, "y": latitude}

        start_time = time.time()
        try:
            response = self.session.get(url, params=params, timeout=self.config.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise UpstreamServiceError(
                f"카카오 API 응답 시간 초과 ({self.config.timeout}초)",
                service_name="kakao",
                cause=e,
            ) from e
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise UpstreamServiceError(
                f"카카오 API 오류 응답: {status_code}",
                service_name="kakao",
                status_code=status_code,
                cause=e,
            ) from e
        except (requests.exceptions.RequestException, ValueError) as e:
            raise UpstreamServiceError(
                f"카카오 API 호출 실패: {e}", service_name="kakao", cause=e
            ) from e

        duration = time.time() - start_time
        get_logger_instance().log_api_call(
            "kakao", COORD2ADDRESS_PATH, response.status_code, duration
        )

        documents = data.get("documents") or []
        if not documents:
            raise UpstreamServiceError(
                f"좌표에 해당하는 주소가 없습니다: ({latitude}, {longitude})",
                service_name="kakao",
            )

        address = pick_address(documents[0])
        if not address:
            raise UpstreamServiceError(
                "응답에 address/road_address 정보가 없습니다.", service_name="kakao"
            )

        return {field_name: address.get(field_name) for field_name in ADDRESS_FIELDS}
