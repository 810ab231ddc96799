"""
여행지 태그 보강 작업

모든 여행지의 제목으로 검색 엔진을 스크래핑하여 태그를 수집하고,
여행지별 태그 연결을 최신 스크래핑 결과로 교체합니다.

- 여행지는 id 기준 키셋 페이지 단위로 순회
- 여행지 하나의 스크래핑/저장 실패는 기록 후 다음 여행지로 진행
- 브라우저를 사용할 수 없으면 전체 작업 중단
- 태그 연결 삭제와 재생성은 여행지마다 하나의 트랜잭션
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Tuple

from app.collectors.search_tag_scraper import (
    ScrapedResult,
    SeleniumSearchTagScraper,
    TagScraper,
)
from app.core.base_job import BaseJob, JobConfig, JobResult
from app.core.database_manager import DatabaseManager, get_db_manager
from app.core.error_handling import (
    NotFoundError,
    RetryConfig,
    ScraperError,
    ScraperUnavailableError,
    call_with_retry,
    handle_exception,
)
from app.models import TourSpot
from app.services.spot_tag_store import SpotTagLinkStore
from app.services.tag_store import TagStore, normalize_tag_name
from config.constants import MESSAGES, JobStatus, JobType
from config.settings import EnrichmentConfig, get_enrichment_config

# API 요청과 스케줄러가 공유하는 실행 잠금
_RUN_LOCK = threading.Lock()


def is_enrichment_running() -> bool:
    """태그 보강 작업 실행 중 여부"""
    return _RUN_LOCK.locked()


def reserve_enrichment_run() -> bool:
    """실행 잠금을 미리 확보. 확보한 쪽이 release_enrichment_run 호출"""
    return _RUN_LOCK.acquire(blocking=False)


def release_enrichment_run() -> None:
    _RUN_LOCK.release()


def flatten_tag_names(results: List[ScrapedResult]) -> List[str]:
    """모든 검색 결과의 태그 이름을 순서대로 펼침 (정규화 후 빈 이름 제외)"""
    names = []
    for scraped in results:
        for raw_name in scraped.tags or []:
            name = normalize_tag_name(raw_name)
            if name:
                names.append(name)
    return names


@dataclass
class SpotEnrichmentOutcome:
    """여행지 한 곳의 태그 보강 결과"""

    spot_id: int
    result_count: int = 0
    tag_names: List[str] = field(default_factory=list)
    links_created: int = 0
    tags_created: int = 0


class TagEnrichmentJob(BaseJob):
    """여행지 태그 보강 작업"""

    def __init__(
        self,
        config: Optional[JobConfig] = None,
        scraper: Optional[TagScraper] = None,
        db_manager: Optional[DatabaseManager] = None,
        enrichment_config: Optional[EnrichmentConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(
            config
            or JobConfig(job_name="tag_enrichment", job_type=JobType.TAG_ENRICHMENT)
        )
        self.enrichment_config = enrichment_config or get_enrichment_config()
        self.db_manager = db_manager or get_db_manager()
        self._scraper = scraper
        self._owns_scraper = scraper is None
        self._sleep = sleep
        self.retry_config = RetryConfig(
            max_attempts=self.enrichment_config.max_attempts,
            base_delay=self.enrichment_config.retry_delay,
            retry_on=(ScraperError,),
            stop_on=(ScraperUnavailableError,),
        )

    @property
    def scraper(self) -> TagScraper:
        if self._scraper is None:
            self._scraper = SeleniumSearchTagScraper()
        return self._scraper

    def run(self, reserved: bool = False) -> JobResult:
        """동시에 하나의 보강 작업만 실행

        Args:
            reserved: 호출자가 reserve_enrichment_run()으로 잠금을 이미 확보했는지 여부
        """
        if reserved:
            return super().run()
        if not reserve_enrichment_run():
            result = self.new_result()
            result.status = JobStatus.SKIPPED
            result.error_message = MESSAGES["enrichment_running"]
            result.end_time = result.start_time
            self.logger.warning(MESSAGES["enrichment_running"])
            return result
        try:
            return super().run()
        finally:
            release_enrichment_run()

    def iter_spot_pages(self) -> Iterator[List[Tuple[int, str, str]]]:
        """(id, content_id, title) 목록을 페이지 단위로 순회"""
        last_id = 0
        page_size = max(1, self.enrichment_config.page_size)
        while True:
            with self.db_manager.get_session() as session:
                rows = (
                    session.query(TourSpot.id, TourSpot.content_id, TourSpot.title)
                    .filter(TourSpot.id > last_id)
                    .order_by(TourSpot.id)
                    .limit(page_size)
                    .all()
                )
            if not rows:
                return
            yield [tuple(row) for row in rows]
            last_id = rows[-1][0]

    def execute(self) -> JobResult:
        """태그 보강 실행"""
        result = self.new_result()
        stats = {
            "spots_total": 0,
            "spots_enriched": 0,
            "spots_failed": 0,
            "links_created": 0,
            "tags_created": 0,
        }
        failures = []

        try:
            for page in self.iter_spot_pages():
                for spot_id, content_id, title in page:
                    stats["spots_total"] += 1
                    try:
                        outcome = self.enrich_spot(spot_id, title)
                    except ScraperUnavailableError:
                        raise
                    except Exception as e:
                        error = handle_exception(e)
                        stats["spots_failed"] += 1
                        failures.append(
                            {
                                "content_id": content_id,
                                "error_code": error.error_code,
                                "error": error.message,
                            }
                        )
                        self.logger.warning(
                            f"여행지 태그 보강 실패 [{content_id}] {title}: {error.message}"
                        )
                        continue

                    stats["spots_enriched"] += 1
                    stats["links_created"] += outcome.links_created
                    stats["tags_created"] += outcome.tags_created
                    self.logger.info(
                        f"여행지 태그 보강 [{content_id}] {title}: "
                        f"결과 {outcome.result_count}건, 태그 {outcome.links_created}개"
                    )
        except ScraperUnavailableError as e:
            result.status = JobStatus.FAILED
            result.error_message = e.message
            self.logger.error(f"스크래퍼 사용 불가로 태그 보강 중단: {e.message}")
        finally:
            if self._owns_scraper and self._scraper is not None:
                self._scraper.close()
                self._scraper = None

        result.processed_records = stats["spots_enriched"]
        result.metadata = {**stats, "failures": failures}
        self.logger.info(
            f"태그 보강 결과: 전체 {stats['spots_total']}, 성공 {stats['spots_enriched']}, "
            f"실패 {stats['spots_failed']}, 새 태그 {stats['tags_created']}"
        )
        return result

    def scrape(self, keyword: str) -> List[ScrapedResult]:
        """검색어 스크래핑 (ScraperError는 재시도)"""
        return call_with_retry(
            self.scraper.get_search_content,
            self.retry_config,
            keyword,
            sleep=self._sleep,
        )

    def enrich_spot(self, spot_id: int, keyword: str) -> SpotEnrichmentOutcome:
        """여행지 한 곳의 태그 집합을 새 스크래핑 결과로 교체

        검색어는 여행지 제목을 가공 없이 사용합니다.
        결과가 0건이어도 기존 태그 연결은 삭제됩니다.
        """
        results = self.scrape(keyword)
        tag_names = flatten_tag_names(results)
        outcome = SpotEnrichmentOutcome(spot_id=spot_id, result_count=len(results))

        with self.db_manager.get_session() as session:
            spot = session.get(TourSpot, spot_id)
            if spot is None:
                raise NotFoundError(f"여행지 없음: id={spot_id}", resource="tour_spots")

            tag_store = TagStore(session)
            tags = []
            for name in tag_names:
                tag, created = tag_store.get_or_create(name)
                if created:
                    outcome.tags_created += 1
                tags.append(tag)

            links = SpotTagLinkStore(session).replace_for_spot(spot, tags)
            outcome.links_created = len(links)
            outcome.tag_names = [tag.name for tag in tags]

        return outcome


def run_tag_enrichment(
    scraper: Optional[TagScraper] = None, reserved: bool = False
) -> JobResult:
    """태그 보강 작업 실행 (스케줄러/CLI/API 공용)"""
    return TagEnrichmentJob(scraper=scraper).run(reserved=reserved)
