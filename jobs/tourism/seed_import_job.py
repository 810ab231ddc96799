"""
시드 데이터 가져오기 배치 작업

지역 코드 파일과 지역기반 관광정보 파일을 순서대로 가져옵니다.
"""

from typing import Optional

from app.core.base_job import BaseJob, JobConfig, JobResult
from app.core.database_manager import DatabaseManager
from app.processors.seed_data_importer import SeedDataImporter
from config.constants import JobStatus, JobType
from config.settings import SeedDataConfig


class SeedImportJob(BaseJob):
    """시드 데이터 가져오기 작업"""

    def __init__(
        self,
        config: Optional[JobConfig] = None,
        seed_config: Optional[SeedDataConfig] = None,
        db_manager: Optional[DatabaseManager] = None,
        include_areas: bool = True,
        include_tour_spots: bool = True,
    ):
        if config is None:
            config = JobConfig(
                job_name="seed_import",
                job_type=JobType.SEED_IMPORT,
                retry_count=1,
                timeout_minutes=30,
            )
        super().__init__(config)
        self.importer = SeedDataImporter(config=seed_config, db_manager=db_manager)
        self.include_areas = include_areas
        self.include_tour_spots = include_tour_spots

    def execute(self) -> JobResult:
        result = self.new_result()
        steps = []
        if self.include_areas:
            steps.append(("areas", self.importer.import_areas))
        if self.include_tour_spots:
            steps.append(("tour_spots", self.importer.import_tour_spots))

        for name, step in steps:
            self.logger.info(f"시드 데이터 가져오기 단계 시작: {name}")
            step_result = step()
            result.metadata[name] = step_result.to_dict()

            if not step_result.success:
                # 지역이 없으면 관광지 가져오기도 의미가 없으므로 중단
                result.status = JobStatus.FAILED
                result.error_message = step_result.message
                break
            result.processed_records += step_result.data["inserted"]

        return result
