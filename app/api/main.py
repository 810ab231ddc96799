"""
Travel Planner API Server

여행지 조회, 사용자 위치 갱신, 배치 작업 실행을 위한 REST API 서버
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.config import settings
from app.api.routers import batch, locations, tour_spots
from app.api.schemas import HealthResponse
from app.core.database_manager import get_db_manager
from app.core.logger import get_logger
from app.schedulers.enrichment_scheduler import EnrichmentScheduler

logger = get_logger(__name__)

# 전역 스케줄러 인스턴스
scheduler: EnrichmentScheduler = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리"""
    global scheduler

    # 시작 시
    logger.info(f"Travel Planner API 시작 - Port: {settings.PORT}")
    logger.info(f"환경: {settings.ENVIRONMENT}")

    get_db_manager().create_tables()

    if settings.ENABLE_SCHEDULER:
        scheduler = EnrichmentScheduler()
        scheduler.start()

    yield

    # 종료 시
    logger.info("Travel Planner API 종료")
    if scheduler:
        scheduler.shutdown()
        scheduler = None


# FastAPI 앱 생성
app = FastAPI(
    title="Travel Planner API",
    description="여행지 조회 및 태그 보강 배치 API",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(tour_spots.router, prefix="/api/tour-spots", tags=["tour-spots"])
app.include_router(locations.router, prefix="/api/users", tags=["locations"])
app.include_router(batch.router, prefix="/api/batch", tags=["batch"])


@app.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        service=settings.SERVICE_NAME,
        version=settings.VERSION,
        scheduler={
            "running": bool(scheduler and scheduler.is_running),
            "jobs": scheduler.get_jobs() if scheduler and scheduler.is_running else [],
        },
    )


if __name__ == "__main__":
    uvicorn.run(
        "app.api.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
