"""
시드 데이터 가져오기 작업 통합 테스트
"""

import json
import tempfile
import unittest
from pathlib import Path

from app.core.database_manager import DatabaseManager
from app.models import Area, TourSpot
from config.constants import JobStatus
from config.settings import DatabaseConfig, SeedDataConfig
from jobs.tourism.seed_import_job import SeedImportJob


class TestSeedImportJobIntegration(unittest.TestCase):
    """시드 데이터 가져오기 작업 통합 테스트"""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.data_dir = Path(self.temp_dir.name)
        self.db_manager = DatabaseManager(
            DatabaseConfig(host="", user="", password="", database="", url="sqlite://")
        )
        self.db_manager.create_tables()
        self.seed_config = SeedDataConfig(data_dir=str(self.data_dir))

    def tearDown(self):
        self.db_manager.dispose()
        self.temp_dir.cleanup()

    def test_imports_areas_then_tour_spots(self):
        (self.data_dir / "area-data.json").write_text(
            json.dumps([{"areaCode": "1", "areaName": "서울"}]), encoding="utf-8"
        )
        (self.data_dir / "areaBasedList1.json").write_text(
            json.dumps(
                {
                    "response": {
                        "body": {
                            "items": {
                                "item": [
                                    {"contentid": "500", "title": "Sunny Beach", "areacode": "1"}
                                ]
                            }
                        }
                    }
                }
            ),
            encoding="utf-8",
        )

        result = SeedImportJob(seed_config=self.seed_config, db_manager=self.db_manager).run()

        self.assertEqual(result.status, JobStatus.COMPLETED)
        self.assertEqual(result.processed_records, 2)
        self.assertTrue(result.metadata["areas"]["success"])
        with self.db_manager.get_session() as session:
            self.assertEqual(session.query(Area).count(), 1)
            self.assertEqual(session.query(TourSpot).count(), 1)

    def test_area_failure_stops_job(self):
        result = SeedImportJob(seed_config=self.seed_config, db_manager=self.db_manager).run()

        self.assertEqual(result.status, JobStatus.FAILED)
        self.assertNotIn("tour_spots", result.metadata)


if __name__ == "__main__":
    unittest.main()
