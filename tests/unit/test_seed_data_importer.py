"""
시드 데이터 가져오기 단위 테스트
"""

import json
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from app.core.database_manager import DatabaseManager
from app.core.error_handling import ErrorCategory
from app.models import Area, TourSpot
from app.processors.seed_data_importer import (
    SeedDataImporter,
    extract_items,
    map_tour_spot_item,
)
from config.constants import MESSAGES
from config.settings import DatabaseConfig, SeedDataConfig


def kto_payload(items):
    return {
        "response": {
            "header": {"resultCode": "0000", "resultMsg": "OK"},
            "body": {"items": {"item": items}, "numOfRows": 10, "pageNo": 1},
        }
    }


SUNNY_BEACH = {
    "contentid": "500",
    "contenttypeid": "12",
    "title": "Sunny Beach",
    "addr1": "부산광역시 해운대구",
    "areacode": "1",
    "sigungucode": "16",
    "mapx": "129.1604",
    "mapy": "35.1587",
    "createdtime": "20200101093000",
    "modifiedtime": "20240315120000",
}


class TestKtoParsing(unittest.TestCase):
    """KTO 응답 파싱 테스트"""

    def test_extract_items_single_dict(self):
        self.assertEqual(extract_items(kto_payload(SUNNY_BEACH)), [SUNNY_BEACH])

    def test_extract_items_empty(self):
        payload = {"response": {"body": {"items": ""}}}
        self.assertEqual(extract_items(payload), [])

    def test_extract_items_invalid(self):
        with self.assertRaises(ValueError):
            extract_items({"unexpected": True})

    def test_map_tour_spot_item(self):
        mapped = map_tour_spot_item(SUNNY_BEACH)

        self.assertEqual(mapped["content_id"], "500")
        self.assertEqual(mapped["map_x"], 129.1604)
        self.assertEqual(mapped["created_time"], datetime(2020, 1, 1, 9, 30, 0))
        self.assertIsNone(mapped["tel"])


class TestSeedDataImporter(unittest.TestCase):
    """시드 데이터 가져오기 테스트"""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.data_dir = Path(self.temp_dir.name)
        self.db_manager = DatabaseManager(
            DatabaseConfig(host="", user="", password="", database="", url="sqlite://")
        )
        self.db_manager.create_tables()
        self.importer = SeedDataImporter(
            config=SeedDataConfig(data_dir=str(self.data_dir)),
            db_manager=self.db_manager,
        )

    def tearDown(self):
        self.db_manager.dispose()
        self.temp_dir.cleanup()

    def write_json(self, name, payload):
        (self.data_dir / name).write_text(json.dumps(payload), encoding="utf-8")

    def test_import_areas_insert_only(self):
        self.write_json(
            "area-data.json",
            [{"areaCode": "1", "areaName": "서울"}, {"areaCode": 39}, {}],
        )

        first = self.importer.import_areas()
        second = self.importer.import_areas()

        self.assertTrue(first.success)
        self.assertEqual(first.message, MESSAGES["import_success"])
        self.assertEqual(first.data["inserted"], 2)
        self.assertEqual(first.data["invalid"], 1)
        self.assertEqual(second.data["inserted"], 0)
        self.assertEqual(second.data["skipped"], 2)
        with self.db_manager.get_session() as session:
            self.assertEqual(session.query(Area).count(), 2)
            jeju = session.query(Area).filter_by(area_code="39").one()
            self.assertEqual(jeju.area_name, "제주")

    def test_import_tour_spots_reads_matching_files(self):
        self.write_json("areaBasedList1.json", kto_payload([SUNNY_BEACH]))
        self.write_json(
            "areaBasedList2.json",
            kto_payload({"contentid": "501", "title": "Moon Hill", "areacode": "1"}),
        )
        self.write_json("other.json", kto_payload([{"contentid": "999", "title": "무시"}]))

        result = self.importer.import_tour_spots()

        self.assertTrue(result.success)
        self.assertEqual(result.data["files"], 2)
        self.assertEqual(result.data["inserted"], 2)
        with self.db_manager.get_session() as session:
            self.assertEqual(
                sorted(content_id for (content_id,) in session.query(TourSpot.content_id)),
                ["500", "501"],
            )

    def test_existing_tour_spot_is_not_updated(self):
        """이미 있는 content_id는 건너뛰며 기존 값을 유지"""
        with self.db_manager.get_session() as session:
            session.add(TourSpot(content_id="500", title="Old Title"))
        self.write_json("areaBasedList1.json", kto_payload([SUNNY_BEACH]))

        result = self.importer.import_tour_spots()

        self.assertEqual(result.data["skipped"], 1)
        self.assertEqual(result.data["inserted"], 0)
        with self.db_manager.get_session() as session:
            spot = session.query(TourSpot).filter_by(content_id="500").one()
            self.assertEqual(spot.title, "Old Title")

    def test_duplicate_within_batch(self):
        self.write_json("areaBasedList1.json", kto_payload([SUNNY_BEACH, SUNNY_BEACH]))

        result = self.importer.import_tour_spots()

        self.assertEqual(result.data["inserted"], 1)
        self.assertEqual(result.data["skipped"], 1)

    def test_missing_area_file(self):
        result = self.importer.import_areas()

        self.assertFalse(result.success)
        self.assertEqual(result.message, MESSAGES["import_failed"])
        self.assertEqual(result.category, ErrorCategory.PERSISTENCE)

    def test_malformed_json(self):
        (self.data_dir / "areaBasedList1.json").write_text("{not json", encoding="utf-8")

        result = self.importer.import_tour_spots()

        self.assertFalse(result.success)
        self.assertEqual(result.message, MESSAGES["import_failed"])

    def test_missing_data_dir(self):
        importer = SeedDataImporter(
            config=SeedDataConfig(data_dir=str(self.data_dir / "missing")),
            db_manager=self.db_manager,
        )
        result = importer.import_tour_spots()

        self.assertFalse(result.success)
        self.assertEqual(result.message, MESSAGES["import_failed"])


if __name__ == "__main__":
    unittest.main()
