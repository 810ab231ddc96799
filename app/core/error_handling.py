"""
통합 오류 처리 프레임워크

프로젝트 전체에서 일관된 오류 처리와 로깅을 제공합니다.

서비스 계층의 공개 연산은 모두 ``ServiceResult`` 를 반환합니다.
내부에서는 ``TravelPlannerError`` 계열 예외를 발생시키고, ``service_operation``
데코레이터가 원인을 로그로 남긴 뒤 호출자에게는 고정된 메시지만 전달합니다.
"""

import functools
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional

import requests
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """오류 심각도 수준"""

    CRITICAL = "critical"  # 시스템 중단 수준
    HIGH = "high"  # 주요 기능 영향
    MEDIUM = "medium"  # 일부 기능 영향
    LOW = "low"  # 경미한 문제


class ErrorCategory(Enum):
    """오류 카테고리"""

    UPSTREAM_SERVICE = "upstream_service"  # 외부 API, 스크래퍼
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    PERSISTENCE = "persistence"  # 데이터베이스, 파일 저장소
    CONFIGURATION = "config"
    SYSTEM = "system"


@dataclass
class ErrorContext:
    """오류 컨텍스트 정보"""

    operation: str = ""
    module: str = ""
    function: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    technical_message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환 (JSON 직렬화용)"""
        return {
            "operation": self.operation,
            "module": self.module,
            "function": self.function,
            "parameters": self._sanitize_parameters(self.parameters),
            "metadata": self.metadata,
            "timestamp": self.timestamp.isoformat(),
            "technical_message": self.technical_message,
        }

    def _sanitize_parameters(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """민감 정보 제거"""
        sensitive_keys = {"api_key", "password", "token", "secret", "auth", "key"}
        sanitized = {}
        for key, value in params.items():
            if any(sensitive in key.lower() for sensitive in sensitive_keys):
                sanitized[key] = "***"
            else:
                sanitized[key] = value
        return sanitized


class TravelPlannerError(Exception):
    """프로젝트 기본 예외 클래스"""

    def __init__(
        self,
        message: str,
        error_code: str = "TP_UNKNOWN",
        category: ErrorCategory = ErrorCategory.SYSTEM,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.cause = cause
        self.user_message = user_message

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


# ========== 특화된 예외 클래스들 ==========


class UpstreamServiceError(TravelPlannerError):
    """외부 서비스(API, 스크래퍼) 관련 오류"""

    def __init__(
        self,
        message: str,
        service_name: str = "",
        status_code: Optional[int] = None,
        **kwargs,
    ):
        kwargs.setdefault(
            "error_code",
            f"TP_UPSTREAM_{service_name.upper()}" if service_name else "TP_UPSTREAM",
        )
        super().__init__(message, category=ErrorCategory.UPSTREAM_SERVICE, **kwargs)
        self.service_name = service_name
        self.status_code = status_code
        self.context.metadata.update(
            {"service_name": service_name, "status_code": status_code}
        )


class NotFoundError(TravelPlannerError):
    """조회 대상이 존재하지 않음"""

    def __init__(self, message: str, resource: str = "", **kwargs):
        super().__init__(
            message,
            error_code="TP_NOT_FOUND",
            category=ErrorCategory.NOT_FOUND,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.resource = resource


class ValidationError(TravelPlannerError):
    """데이터 검증 관련 오류"""

    def __init__(
        self, message: str, field_name: str = "", field_value: Any = None, **kwargs
    ):
        super().__init__(
            message,
            error_code="TP_VALIDATION_ERROR",
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field_name = field_name
        self.field_value = field_value
        self.context.metadata.update(
            {
                "field_name": field_name,
                "field_value": str(field_value)[:100] if field_value else None,
            }
        )


class PersistenceError(TravelPlannerError):
    """데이터베이스/파일 저장소 관련 오류"""

    def __init__(self, message: str, table_name: str = "", **kwargs):
        super().__init__(
            message,
            error_code="TP_PERSISTENCE_ERROR",
            category=ErrorCategory.PERSISTENCE,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.table_name = table_name
        self.context.metadata.update({"table_name": table_name})


class ConfigurationError(TravelPlannerError):
    """설정 관련 오류"""

    def __init__(self, message: str, config_key: str = "", **kwargs):
        super().__init__(
            message,
            error_code="TP_CONFIG_ERROR",
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.config_key = config_key
        self.context.metadata.update({"config_key": config_key})


class ScraperError(UpstreamServiceError):
    """단일 검색어 스크래핑 실패 (해당 여행지만 실패 처리)"""

    def __init__(self, message: str, keyword: str = "", **kwargs):
        super().__init__(message, service_name="scraper", **kwargs)
        self.keyword = keyword
        self.context.parameters.update({"keyword": keyword})


class ScraperUnavailableError(ScraperError):
    """브라우저를 사용할 수 없음 (전체 작업 중단)"""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("severity", ErrorSeverity.CRITICAL)
        super().__init__(message, **kwargs)


# ========== 결과 타입 ==========


@dataclass
class ServiceResult:
    """서비스 연산 결과"""

    success: bool
    data: Any = None
    message: str = ""
    error_code: Optional[str] = None
    category: Optional[ErrorCategory] = None

    @classmethod
    def ok(cls, data: Any = None, message: str = "") -> "ServiceResult":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: TravelPlannerError, message: str) -> "ServiceResult":
        return cls(
            success=False,
            message=message,
            error_code=error.error_code,
            category=error.category,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {"success": self.success, "message": self.message}
        if self.success:
            result["data"] = self.data
        else:
            result["error_code"] = self.error_code
            result["category"] = self.category.value if self.category else None
        return result


# ========== 오류 처리 유틸리티 ==========


class RetryConfig:
    """재시도 설정"""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        exponential_base: float = 2.0,
        retry_on: tuple = (Exception,),
        stop_on: tuple = (),
    ):
        self.max_attempts = max(1, max_attempts)
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.retry_on = retry_on
        self.stop_on = stop_on

    def calculate_delay(self, attempt: int) -> float:
        """재시도 지연 시간 계산 (지수 백오프)"""
        delay = self.base_delay * (self.exponential_base ** (attempt - 1))
        return min(delay, self.max_delay)


def call_with_retry(
    func: Callable,
    retry_config: RetryConfig,
    *args,
    sleep: Callable[[float], None] = time.sleep,
    **kwargs,
):
    """재시도 설정에 따라 함수 호출

    ``stop_on`` 예외는 즉시 전파하고, ``retry_on`` 예외는 마지막 시도까지 재시도합니다.
    """
    for attempt in range(1, retry_config.max_attempts + 1):
        try:
            return func(*args, **kwargs)
        except retry_config.stop_on:
            raise
        except retry_config.retry_on as e:
            if attempt == retry_config.max_attempts:
                raise
            delay = retry_config.calculate_delay(attempt)
            logger.warning(
                f"{getattr(func, '__name__', 'call')} 실패 "
                f"({attempt}/{retry_config.max_attempts}), {delay:.1f}초 후 재시도: {e}"
            )
            sleep(delay)


def handle_exception(
    e: Exception, context: Optional[ErrorContext] = None
) -> TravelPlannerError:
    """일반 예외를 TravelPlanner 오류로 변환"""
    if isinstance(e, TravelPlannerError):
        return e

    error_context = context or ErrorContext()
    error_context.technical_message = str(e)

    if isinstance(e, SQLAlchemyError):
        return PersistenceError(str(e), context=error_context, cause=e)
    elif isinstance(e, requests.exceptions.RequestException):
        return UpstreamServiceError(str(e), context=error_context, cause=e)
    elif isinstance(e, TimeoutError):
        return UpstreamServiceError(str(e), context=error_context, cause=e)
    elif isinstance(e, (OSError, ValueError)):
        # 파일 읽기, JSON 파싱 실패
        return PersistenceError(str(e), context=error_context, cause=e)
    return TravelPlannerError(str(e), context=error_context, cause=e)


def service_operation(
    operation: str,
    failure_message: str,
    passthrough_categories: tuple = (ErrorCategory.NOT_FOUND, ErrorCategory.VALIDATION),
):
    """공개 서비스 연산 데코레이터

    감싼 함수의 반환값을 ``ServiceResult`` 로 변환하고, 모든 예외를 실패 결과로 바꿉니다.
    ``passthrough_categories`` 에 해당하는 오류는 예외의 ``user_message`` 를 그대로 노출하고,
    나머지는 ``failure_message`` 만 노출합니다.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> ServiceResult:
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                context = ErrorContext(
                    operation=operation,
                    module=func.__module__,
                    function=func.__name__,
                )
                error = handle_exception(e, context)
                if error.category in passthrough_categories:
                    logger.warning(f"{operation} 실패: {error.message}")
                    message = error.user_message or failure_message
                else:
                    logger.error(
                        f"{operation} 실패 [{error.error_code}]: {error.message}",
                        exc_info=e,
                    )
                    message = failure_message
                return ServiceResult.fail(error, message)

            if isinstance(result, ServiceResult):
                return result
            return ServiceResult.ok(result)

        return wrapper

    return decorator


# 카테고리별 HTTP 상태 코드
HTTP_STATUS_BY_CATEGORY: Dict[ErrorCategory, int] = {
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.VALIDATION: 422,
    ErrorCategory.UPSTREAM_SERVICE: 502,
    ErrorCategory.PERSISTENCE: 500,
    ErrorCategory.CONFIGURATION: 500,
    ErrorCategory.SYSTEM: 500,
}


def http_status_for(category: Optional[ErrorCategory]) -> int:
    """오류 카테고리에 대응하는 HTTP 상태 코드"""
    return HTTP_STATUS_BY_CATEGORY.get(category, 500)

