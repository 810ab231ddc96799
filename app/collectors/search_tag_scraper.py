"""
검색 엔진 태그 스크래퍼

헤드리스 브라우저(Selenium)로 검색 결과 페이지를 열어 결과마다 달린 해시태그를 수집합니다.
태그 보강 작업은 ``TagScraper`` 인터페이스에만 의존합니다.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import quote_plus

import urllib3
from selenium import webdriver
from selenium.common.exceptions import (
    InvalidSessionIdException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait
from webdriver_manager.chrome import ChromeDriverManager

from app.core.error_handling import ScraperError, ScraperUnavailableError
from config.settings import ScraperConfig, get_scraper_config


@dataclass
class ScrapedResult:
    """검색 결과 1건"""

    title: str = ""
    url: str = ""
    tags: List[str] = field(default_factory=list)


def clean_tag_text(text: Optional[str]) -> Optional[str]:
    """해시태그 텍스트에서 '#'과 공백 제거. 빈 태그는 None"""
    if not text:
        return None
    cleaned = text.strip().lstrip("#").strip()
    return cleaned or None


# 브라우저 프로세스가 사라졌을 때 WebDriverException 메시지에 나타나는 문구
BROWSER_GONE_MARKERS = ("chrome not reachable", "disconnected", "session deleted")


def is_browser_gone(error: WebDriverException) -> bool:
    message = str(error.msg or error).lower()
    return any(marker in message for marker in BROWSER_GONE_MARKERS)


class TagScraper(ABC):
    """검색어 → 검색 결과(태그 목록 포함) 스크래퍼 인터페이스"""

    @abstractmethod
    def get_search_content(self, keyword: str) -> List[ScrapedResult]:
        """검색어로 검색한 결과 목록 반환

        Raises:
            ScraperError: 해당 검색어 처리 실패 (타임아웃, 페이지 이동 오류)
            ScraperUnavailableError: 브라우저를 사용할 수 없음
        """

    def close(self) -> None:
        """리소스 정리"""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class SeleniumSearchTagScraper(TagScraper):
    """Selenium 헤드리스 크롬 기반 검색 태그 스크래퍼"""

    def __init__(self, config: Optional[ScraperConfig] = None):
        self.config = config or get_scraper_config()
        self.logger = logging.getLogger(self.__class__.__name__)
        self._driver = None

    def _create_driver(self):
        chrome_options = Options()
        if self.config.headless:
            chrome_options.add_argument("--headless=new")
        chrome_options.add_argument("--window-size=1920,1080")
        chrome_options.add_argument("--no-sandbox")
        chrome_options.add_argument("--disable-dev-shm-usage")

        try:
            driver_path = self.config.driver_path or ChromeDriverManager().install()
            driver = webdriver.Chrome(service=Service(driver_path), options=chrome_options)
            driver.set_page_load_timeout(self.config.page_load_timeout)
        except WebDriverException as e:
            raise ScraperUnavailableError(
                f"브라우저 초기화 실패: {e.msg or e}", cause=e
            ) from e
        except (OSError, ValueError) as e:
            raise ScraperUnavailableError(f"크롬 드라이버 준비 실패: {e}", cause=e) from e

        self.logger.info("🛠 Selenium 드라이버 초기화 완료")
        return driver

    @property
    def driver(self):
        if self._driver is None:
            self._driver = self._create_driver()
        return self._driver

    def build_search_url(self, keyword: str) -> str:
        return self.config.search_url.format(keyword=quote_plus(keyword))

    def get_search_content(self, keyword: str) -> List[ScrapedResult]:
        url = self.build_search_url(keyword)
        driver = self.driver

        try:
            driver.get(url)
            WebDriverWait(driver, self.config.page_load_timeout).until(
                lambda d: d.execute_script("return document.readyState") == "complete"
            )
            elements = driver.find_elements(By.CSS_SELECTOR, self.config.result_selector)
            results = [
                self._parse_result_element(element)
                for element in elements[: self.config.max_results]
            ]
        except InvalidSessionIdException as e:
            self._driver = None
            raise ScraperUnavailableError(
                f"브라우저 세션 종료됨: {keyword}", keyword=keyword, cause=e
            ) from e
        except TimeoutException as e:
            raise ScraperError(
                f"검색 페이지 로딩 시간 초과: {keyword}", keyword=keyword, cause=e
            ) from e
        except WebDriverException as e:
            if is_browser_gone(e):
                self._driver = None
                raise ScraperUnavailableError(
                    f"브라우저 연결 끊김: {keyword} ({e.msg or e})",
                    keyword=keyword,
                    cause=e,
                ) from e
            raise ScraperError(
                f"검색 페이지 처리 실패: {keyword} ({e.msg or e})",
                keyword=keyword,
                cause=e,
            ) from e
        except (urllib3.exceptions.HTTPError, ConnectionError) as e:
            # 크롬 드라이버 프로세스와 통신 불가
            self._driver = None
            raise ScraperUnavailableError(
                f"크롬 드라이버 연결 실패: {keyword} ({e})", keyword=keyword, cause=e
            ) from e

        self.logger.debug(
            f"검색 완료: {keyword}, 결과 {len(results)}건, "
            f"태그 {sum(len(r.tags) for r in results)}개"
        )
        return results

    def _parse_result_element(self, element) -> ScrapedResult:
        """검색 결과 요소 하나에서 제목, 링크, 태그 추출"""
        title = ""
        url = ""
        title_links = element.find_elements(By.CSS_SELECTOR, self.config.title_selector)
        if title_links:
            title = (title_links[0].text or "").strip()
            url = title_links[0].get_attribute("href") or ""

        tags = []
        for tag_element in element.find_elements(
            By.CSS_SELECTOR, self.config.tag_selector
        ):
            tag = clean_tag_text(tag_element.text)
            if tag:
                tags.append(tag)

        return ScrapedResult(title=title, url=url, tags=tags)

    def close(self) -> None:
        if self._driver is not None:
            try:
                self._driver.quit()
            except WebDriverException as e:
                self.logger.warning(f"Selenium 드라이버 종료 중 경고: {e}")
            finally:
                self._driver = None
            self.logger.info("✅ Selenium 드라이버 종료")
