"""
배치 작업 API 라우터

시드 데이터 가져오기와 태그 보강 작업을 실행합니다.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from app.api.dependencies import (
    get_enrichment_runner,
    get_seed_data_importer,
    unwrap_result,
)
from app.api.schemas import BatchTriggerResponse, ImportResponse
from app.processors.seed_data_importer import SeedDataImporter
from config.constants import MESSAGES, JobStatus, JobType

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/areas/import", response_model=ImportResponse)
def import_areas(importer: SeedDataImporter = Depends(get_seed_data_importer)):
    """지역 코드 시드 데이터 가져오기"""
    result = importer.import_areas()
    return ImportResponse(message=result.message, data=unwrap_result(result))


@router.post("/tour-spots/import", response_model=ImportResponse)
def import_tour_spots(importer: SeedDataImporter = Depends(get_seed_data_importer)):
    """관광지 시드 데이터 가져오기"""
    result = importer.import_tour_spots()
    return ImportResponse(message=result.message, data=unwrap_result(result))


def _run_reserved(runner) -> None:
    """요청에서 확보한 실행 잠금으로 작업을 실행하고 잠금 해제"""
    from jobs.tourism.tag_enrichment_job import release_enrichment_run

    try:
        runner(reserved=True)
    finally:
        release_enrichment_run()


@router.post("/tag-enrichment", response_model=BatchTriggerResponse, status_code=202)
def trigger_tag_enrichment(
    background_tasks: BackgroundTasks,
    runner=Depends(get_enrichment_runner),
):
    """태그 보강 작업을 백그라운드에서 실행"""
    from jobs.tourism.tag_enrichment_job import reserve_enrichment_run

    # 실행 잠금은 요청 처리 중에 확보하여 백그라운드 작업에 넘김
    if not reserve_enrichment_run():
        raise HTTPException(status_code=409, detail=MESSAGES["enrichment_running"])

    background_tasks.add_task(_run_reserved, runner)
    logger.info("태그 보강 작업 실행 요청 접수")

    return BatchTriggerResponse(
        job_type=JobType.TAG_ENRICHMENT.value,
        status=JobStatus.PENDING.value,
        message="태그 보강 작업이 시작되었습니다.",
    )
