"""
오류 처리 프레임워크 단위 테스트
"""

import unittest
from unittest.mock import Mock

import requests
from sqlalchemy.exc import OperationalError

from app.core.error_handling import (
    ErrorCategory,
    NotFoundError,
    PersistenceError,
    RetryConfig,
    ScraperError,
    ScraperUnavailableError,
    ServiceResult,
    UpstreamServiceError,
    call_with_retry,
    handle_exception,
    http_status_for,
    service_operation,
)


class TestCallWithRetry(unittest.TestCase):
    """재시도 호출 테스트"""

    def setUp(self):
        self.sleep = Mock()
        self.config = RetryConfig(
            max_attempts=3,
            base_delay=1.0,
            retry_on=(ScraperError,),
            stop_on=(ScraperUnavailableError,),
        )

    def test_retries_until_success(self):
        func = Mock(side_effect=[ScraperError("1"), ScraperError("2"), "ok"])

        self.assertEqual(call_with_retry(func, self.config, "kw", sleep=self.sleep), "ok")
        self.assertEqual(func.call_count, 3)
        self.assertEqual([c.args[0] for c in self.sleep.call_args_list], [1.0, 2.0])

    def test_raises_after_max_attempts(self):
        func = Mock(side_effect=ScraperError("always"))

        with self.assertRaises(ScraperError):
            call_with_retry(func, self.config, sleep=self.sleep)
        self.assertEqual(func.call_count, 3)

    def test_stop_on_is_not_retried(self):
        func = Mock(side_effect=ScraperUnavailableError("browser gone"))

        with self.assertRaises(ScraperUnavailableError):
            call_with_retry(func, self.config, sleep=self.sleep)
        self.assertEqual(func.call_count, 1)
        self.sleep.assert_not_called()

    def test_other_errors_are_not_retried(self):
        func = Mock(side_effect=KeyError("x"))

        with self.assertRaises(KeyError):
            call_with_retry(func, self.config, sleep=self.sleep)
        self.assertEqual(func.call_count, 1)


class TestHandleException(unittest.TestCase):
    """예외 변환 테스트"""

    def test_sqlalchemy_error(self):
        error = handle_exception(OperationalError("SELECT 1", {}, Exception("down")))
        self.assertIsInstance(error, PersistenceError)

    def test_requests_error(self):
        error = handle_exception(requests.exceptions.ConnectionError("refused"))
        self.assertIsInstance(error, UpstreamServiceError)

    def test_timeout_error(self):
        self.assertEqual(
            handle_exception(TimeoutError("slow")).category, ErrorCategory.UPSTREAM_SERVICE
        )

    def test_project_error_passes_through(self):
        original = NotFoundError("없음")
        self.assertIs(handle_exception(original), original)


class TestServiceOperation(unittest.TestCase):
    """서비스 연산 데코레이터 테스트"""

    def test_wraps_return_value(self):
        @service_operation("테스트", "실패")
        def operation():
            return [1, 2]

        result = operation()
        self.assertEqual(result, ServiceResult(success=True, data=[1, 2]))

    def test_hides_technical_message(self):
        @service_operation("테스트", "데이터 추가 실패")
        def operation():
            raise OperationalError("INSERT", {}, Exception("password=secret"))

        result = operation()

        self.assertFalse(result.success)
        self.assertEqual(result.message, "데이터 추가 실패")
        self.assertEqual(result.category, ErrorCategory.PERSISTENCE)
        self.assertNotIn("secret", str(result.to_dict()))

    def test_passthrough_user_message(self):
        @service_operation("테스트", "실패")
        def operation():
            raise NotFoundError("user 1", user_message="사용자를 찾을 수 없습니다.")

        result = operation()
        self.assertEqual(result.message, "사용자를 찾을 수 없습니다.")
        self.assertEqual(result.category, ErrorCategory.NOT_FOUND)


class TestHttpStatus(unittest.TestCase):
    """오류 카테고리 → HTTP 상태 코드"""

    def test_mapping(self):
        self.assertEqual(http_status_for(ErrorCategory.NOT_FOUND), 404)
        self.assertEqual(http_status_for(ErrorCategory.VALIDATION), 422)
        self.assertEqual(http_status_for(ErrorCategory.UPSTREAM_SERVICE), 502)
        self.assertEqual(http_status_for(ErrorCategory.PERSISTENCE), 500)
        self.assertEqual(http_status_for(None), 500)


if __name__ == "__main__":
    unittest.main()
