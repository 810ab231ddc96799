#!/usr/bin/env python3
"""
Travel Planner 배치 작업 수동 실행 도구

시드 데이터 가져오기, 태그 보강 작업을 수동으로 실행하거나
스케줄러/API 서버를 기동하는 CLI 도구입니다.
"""

import sys
import time
import argparse
from pathlib import Path
from datetime import datetime

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.core.base_job import JobResult
from app.core.database_manager import get_db_manager
from app.core.logger import get_logger, get_logger_instance
from app.schedulers.enrichment_scheduler import EnrichmentScheduler
from config.settings import get_app_settings
from jobs.tourism.seed_import_job import SeedImportJob
from jobs.tourism.tag_enrichment_job import TagEnrichmentJob


class BatchJobRunner:
    """배치 작업 실행기"""

    def __init__(self):
        self.logger = get_logger(__name__)
        self.settings = get_app_settings()

        # 사용 가능한 작업 목록
        self.available_jobs = {
            "import-areas": {
                "name": "지역 데이터 가져오기",
                "description": "지역 코드 시드 파일을 areas 테이블에 추가",
                "function": lambda: SeedImportJob(include_tour_spots=False).run(),
            },
            "import-spots": {
                "name": "관광지 데이터 가져오기",
                "description": "areaBasedList*.json 파일을 tour_spots 테이블에 추가",
                "function": lambda: SeedImportJob(include_areas=False).run(),
            },
            "enrich": {
                "name": "여행지 태그 보강",
                "description": "여행지 제목으로 검색 결과 태그를 수집하여 태그 연결 교체",
                "function": lambda: TagEnrichmentJob().run(),
            },
        }

    def list_jobs(self):
        """사용 가능한 작업 목록 출력"""
        print("\n=== Travel Planner 배치 작업 목록 ===")
        print(f"{'작업코드':<15} {'작업명':<20} {'설명'}")
        print("-" * 80)

        for job_code, job_info in self.available_jobs.items():
            print(f"{job_code:<15} {job_info['name']:<20} {job_info['description']}")

        print(f"\n시드 데이터 디렉터리: {self.settings.seed_data.data_dir}")
        print(f"태그 보강 스케줄: {self.settings.enrichment.schedule or '미설정'}")

    def run_job(self, job_code: str) -> bool:
        """지정된 작업 실행"""
        job_info = self.available_jobs[job_code]

        print(f"\n🚀 배치 작업 시작: {job_info['name']}")
        print(f"📋 설명: {job_info['description']}")
        print(f"⏰ 시작 시간: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print("-" * 60)

        job_logger = get_logger_instance()
        job_logger.log_job_start(job_code, job_info["name"])
        result: JobResult = job_info["function"]()

        if result.is_success:
            job_logger.log_job_complete(
                job_code, result.processed_records, result.duration_seconds
            )
            print(f"\n✅ 작업 완료: {job_info['name']}")
        else:
            job_logger.log_job_failure(
                job_code, result.error_message or result.status.value, result.duration_seconds
            )
            print(f"\n❌ 작업 실패: {job_info['name']} ({result.status.value})")
            if result.error_message:
                print(f"🔥 오류: {result.error_message}")

        print(f"⏱️  소요 시간: {result.duration_seconds:.2f}초")
        print(f"📊 처리 건수: {result.processed_records}건")
        for key, value in result.metadata.items():
            if key == "failures":
                print(f"   - failures: {len(value)}건")
                for failure in value[:10]:
                    print(f"     · {failure['content_id']}: {failure['error']}")
            else:
                print(f"   - {key}: {value}")

        return result.is_success

    def init_db(self):
        """테이블 생성"""
        get_db_manager().create_tables()
        print("✅ 데이터베이스 테이블 생성 완료")

    def run_scheduler(self):
        """태그 보강 스케줄러 실행 (Ctrl+C로 종료)"""
        scheduler = EnrichmentScheduler()
        if not scheduler.start():
            print("❌ ENRICHMENT_SCHEDULE이 설정되지 않았습니다.")
            return False

        for job in scheduler.get_jobs():
            print(f"📅 {job['name']} - 다음 실행: {job['next_run_time']}")

        try:
            while True:
                time.sleep(1)
        finally:
            scheduler.shutdown()

    def serve(self):
        """API 서버 실행"""
        import uvicorn

        from app.api.config import settings

        uvicorn.run("app.api.main:app", host=settings.HOST, port=settings.PORT)


def main():
    """메인 함수"""
    parser = argparse.ArgumentParser(
        description="Travel Planner 배치 작업 수동 실행 도구",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
사용 예시:
  python scripts/run_batch.py list            # 사용 가능한 작업 목록
  python scripts/run_batch.py init-db         # 테이블 생성
  python scripts/run_batch.py import-areas    # 지역 데이터 가져오기
  python scripts/run_batch.py import-spots    # 관광지 데이터 가져오기
  python scripts/run_batch.py enrich          # 여행지 태그 보강 실행
  python scripts/run_batch.py schedule        # 태그 보강 스케줄러 실행
  python scripts/run_batch.py serve           # API 서버 실행
        """,
    )

    parser.add_argument(
        "command",
        choices=[
            "list",
            "init-db",
            "import-areas",
            "import-spots",
            "enrich",
            "schedule",
            "serve",
        ],
        help="실행할 명령어",
    )

    args = parser.parse_args()

    # 로거 초기화
    logger = get_logger(__name__)
    logger.info(f"Travel Planner 배치 도구 시작: {args.command}")

    try:
        runner = BatchJobRunner()

        if args.command == "list":
            runner.list_jobs()
        elif args.command == "init-db":
            runner.init_db()
        elif args.command == "schedule":
            sys.exit(0 if runner.run_scheduler() is not False else 1)
        elif args.command == "serve":
            runner.serve()
        else:
            success = runner.run_job(args.command)
            sys.exit(0 if success else 1)

    except KeyboardInterrupt:
        print("\n⚠️  사용자 중단으로 종료합니다.")
        sys.exit(1)
    except Exception as e:
        print(f"❌ 실행 오류: {e}")
        logger.error(f"배치 실행 도구 오류: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
