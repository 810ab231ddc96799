"""
태그 보강 작업 스케줄러 (APScheduler 기반)

ENRICHMENT_SCHEDULE(크론 표현식)에 따라 태그 보강 작업을 주기적으로 실행합니다.
"""

from typing import Callable, List, Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, EVENT_JOB_MISSED
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from app.core.error_handling import ConfigurationError
from app.core.logger import get_logger
from config.settings import EnrichmentConfig, get_enrichment_config

ENRICHMENT_JOB_ID = "tag_enrichment"


def _run_tag_enrichment():
    from jobs.tourism.tag_enrichment_job import run_tag_enrichment

    return run_tag_enrichment()


class EnrichmentScheduler:
    """태그 보강 작업 스케줄러"""

    def __init__(
        self,
        config: Optional[EnrichmentConfig] = None,
        job_function: Optional[Callable] = None,
        timezone: str = "Asia/Seoul",
    ):
        self.config = config or get_enrichment_config()
        self.job_function = job_function or _run_tag_enrichment
        self.logger = get_logger(__name__)
        self.scheduler = BackgroundScheduler(
            jobstores={"default": MemoryJobStore()},
            timezone=timezone,
        )
        self.scheduler.add_listener(
            self._job_executed_listener,
            EVENT_JOB_EXECUTED | EVENT_JOB_ERROR | EVENT_JOB_MISSED,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.config.schedule and self.config.schedule.strip())

    @property
    def is_running(self) -> bool:
        return self.scheduler.running

    def register_job(self, expression: Optional[str] = None) -> str:
        """크론 표현식으로 태그 보강 작업 등록"""
        expression = (expression or self.config.schedule or "").strip()
        try:
            trigger = CronTrigger.from_crontab(expression, timezone=self.scheduler.timezone)
        except ValueError as e:
            raise ConfigurationError(
                f"잘못된 크론 표현식: '{expression}' ({e})",
                config_key="ENRICHMENT_SCHEDULE",
                cause=e,
            )

        job = self.scheduler.add_job(
            func=self.job_function,
            trigger=trigger,
            id=ENRICHMENT_JOB_ID,
            name="여행지 태그 보강",
            max_instances=1,
            coalesce=True,
            misfire_grace_time=300,
            replace_existing=True,
        )
        self.logger.info(f"태그 보강 작업 등록 완료: {expression}")
        return job.id

    def start(self) -> bool:
        """스케줄러 시작. 스케줄이 비어 있으면 시작하지 않음"""
        if not self.enabled:
            self.logger.info("ENRICHMENT_SCHEDULE 미설정, 스케줄러를 시작하지 않습니다")
            return False
        if self.scheduler.running:
            return True

        self.register_job()
        self.scheduler.start()
        self.logger.info("태그 보강 스케줄러 시작")
        return True

    def shutdown(self, wait: bool = False) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
            self.logger.info("태그 보강 스케줄러 종료")

    def get_jobs(self) -> List[dict]:
        """등록된 작업 목록"""
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run_time": (
                    job.next_run_time.isoformat()
                    if getattr(job, "next_run_time", None)
                    else None
                ),
                "trigger": str(job.trigger),
            }
            for job in self.scheduler.get_jobs()
        ]

    def _job_executed_listener(self, event):
        if event.code == EVENT_JOB_MISSED:
            self.logger.warning(f"작업 실행 시각 놓침: {event.job_id}")
        elif event.exception:
            self.logger.error(f"작업 예외 발생: {event.job_id}, 예외: {event.exception}")
        else:
            result = event.retval
            status = getattr(getattr(result, "status", None), "value", None)
            self.logger.info(f"작업 실행 완료: {event.job_id}, 상태: {status}")
