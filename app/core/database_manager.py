"""
데이터베이스 세션 관리

SQLAlchemy 엔진과 세션 팩토리를 한 곳에서 관리합니다.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base
from config.settings import DatabaseConfig, get_database_config

logger = logging.getLogger(__name__)


class DatabaseManager:
    """SQLAlchemy ORM 기반 데이터베이스 매니저"""

    def __init__(
        self,
        config: Optional[DatabaseConfig] = None,
        engine: Optional[Engine] = None,
    ):
        self.config = config or get_database_config()
        self.engine = engine or self._create_engine(self.config)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("데이터베이스 매니저 초기화 완료")

    @staticmethod
    def _create_engine(config: DatabaseConfig) -> Engine:
        url = make_url(config.sqlalchemy_url)
        if url.get_backend_name() == "sqlite":
            options = {}
            if is_sqlite_memory(url):
                # 인메모리 SQLite는 단일 연결을 공유해야 스키마가 유지됨
                options["poolclass"] = StaticPool
            engine = create_engine(
                url,
                echo=config.echo,
                connect_args={"check_same_thread": False},
                **options,
            )
            _enable_sqlite_savepoints(engine)
            return engine
        return create_engine(
            url,
            echo=config.echo,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
        )

    def create_tables(self) -> None:
        """모든 테이블 생성"""
        Base.metadata.create_all(self.engine)
        logger.info("데이터베이스 테이블 생성 완료")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """세션 컨텍스트 매니저 (정상 종료 시 커밋, 예외 시 롤백)"""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        """엔진 종료"""
        self.engine.dispose()
        logger.info("데이터베이스 엔진이 정상적으로 종료되었습니다")


# 전역 인스턴스
_db_manager = None


def get_db_manager() -> DatabaseManager:
    """데이터베이스 매니저 인스턴스 반환"""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def _enable_sqlite_savepoints(engine: Engine) -> None:
    """pysqlite 드라이버에서 SAVEPOINT가 동작하도록 트랜잭션 시작을 직접 제어"""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def is_sqlite_memory(url: URL) -> bool:
    """인메모리 SQLite URL 여부 (sqlite://, :memory:, mode=memory)"""
    database = url.database or ""
    return (
        database in ("", ":memory:")
        or url.query.get("mode") == "memory"
        or "mode=memory" in database
    )
