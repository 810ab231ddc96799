"""
Travel Planner API 통합 테스트
"""

import unittest
from unittest.mock import Mock

from fastapi.testclient import TestClient

from app.api.dependencies import (
    get_enrichment_runner,
    get_location_service,
    get_seed_data_importer,
    get_tour_spot_service,
)
from app.api.main import app
from app.core.database_manager import DatabaseManager
from app.core.error_handling import UpstreamServiceError
from app.models import Tag, TourSpot, TourSpotTag, User
from app.processors.seed_data_importer import SeedDataImporter
from app.services.location_service import LocationService
from app.services.tour_spot_service import TourSpotService
from config.constants import MESSAGES
from config.settings import DatabaseConfig, SeedDataConfig
from jobs.tourism import tag_enrichment_job


class TestTravelPlannerAPI(unittest.TestCase):
    """API 상태 코드 매핑 테스트"""

    def setUp(self):
        self.db_manager = DatabaseManager(
            DatabaseConfig(host="", user="", password="", database="", url="sqlite://")
        )
        self.db_manager.create_tables()

        with self.db_manager.get_session() as session:
            user = User(email="traveler@example.com", nickname="traveler")
            spot = TourSpot(content_id="500", title="Sunny Beach", area_code="1")
            sunset = Tag(name="sunset")
            session.add_all([user, spot, sunset])
            session.flush()
            session.add(TourSpotTag(tour_spot_id=spot.id, tag_id=sunset.id))
            self.user_id = user.id

        self.geocoder = Mock()
        self.geocoder.coord_to_address.return_value = {
            "address_name": "부산 해운대구 우동",
            "region_1depth_name": "부산",
            "region_2depth_name": "해운대구",
            "region_3depth_name": "우동",
        }
        self.runner = Mock()

        app.dependency_overrides[get_tour_spot_service] = lambda: TourSpotService(
            db_manager=self.db_manager
        )
        app.dependency_overrides[get_location_service] = lambda: LocationService(
            db_manager=self.db_manager, geocoder=self.geocoder
        )
        app.dependency_overrides[get_seed_data_importer] = lambda: SeedDataImporter(
            config=SeedDataConfig(data_dir="/nonexistent-seed-dir"),
            db_manager=self.db_manager,
        )
        app.dependency_overrides[get_enrichment_runner] = lambda: self.runner

        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()
        self.db_manager.dispose()

    def test_health(self):
        response = self.client.get("/health")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")

    def test_list_tour_spots(self):
        response = self.client.get("/api/tour-spots")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body), 1)
        self.assertEqual(body[0]["content_id"], "500")
        self.assertEqual(body[0]["tag_names"], ["sunset"])

    def test_tour_spots_by_area(self):
        self.assertEqual(len(self.client.get("/api/tour-spots/area/1").json()), 1)
        self.assertEqual(self.client.get("/api/tour-spots/area/6").json(), [])

    def test_search_by_tag(self):
        response = self.client.get("/api/tour-spots/search", params={"keyword": "sun"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([spot["title"] for spot in response.json()], ["Sunny Beach"])

    def test_search_empty_keyword_is_422(self):
        response = self.client.get("/api/tour-spots/search", params={"keyword": ""})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"], MESSAGES["invalid_keyword"])

    def test_update_location(self):
        response = self.client.put(
            f"/api/users/{self.user_id}/location",
            json={"latitude": 35.1587, "longitude": 129.1604},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], MESSAGES["location_applied"])
        self.assertEqual(body["data"]["region_2depth_name"], "해운대구")

    def test_update_location_unknown_user_is_404(self):
        response = self.client.put(
            "/api/users/9999/location", json={"latitude": 35.1, "longitude": 129.1}
        )

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["detail"], MESSAGES["user_not_found"])

    def test_update_location_invalid_coordinates_is_422(self):
        response = self.client.put(
            f"/api/users/{self.user_id}/location",
            json={"latitude": 135.0, "longitude": 129.1},
        )

        self.assertEqual(response.status_code, 422)

    def test_update_location_upstream_failure_is_502(self):
        self.geocoder.coord_to_address.side_effect = UpstreamServiceError(
            "카카오 API 응답 시간 초과", service_name="kakao"
        )

        response = self.client.put(
            f"/api/users/{self.user_id}/location",
            json={"latitude": 35.1, "longitude": 129.1},
        )

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["detail"], MESSAGES["location_failed"])

    def test_import_failure_is_500(self):
        response = self.client.post("/api/batch/tour-spots/import")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["detail"], MESSAGES["import_failed"])

    def test_trigger_tag_enrichment(self):
        """요청에서 잡은 실행 잠금을 작업에 넘기고 작업이 끝나면 해제"""
        lock_held = []
        self.runner.side_effect = lambda **kwargs: lock_held.append(
            tag_enrichment_job.is_enrichment_running()
        )

        response = self.client.post("/api/batch/tag-enrichment")

        self.assertEqual(response.status_code, 202)
        self.runner.assert_called_once_with(reserved=True)
        self.assertEqual(lock_held, [True])
        self.assertFalse(tag_enrichment_job.is_enrichment_running())

    def test_trigger_releases_lock_when_run_fails(self):
        self.runner.side_effect = RuntimeError("크롬 실행 실패")
        client = TestClient(app, raise_server_exceptions=False)

        response = client.post("/api/batch/tag-enrichment")

        self.assertEqual(response.status_code, 202)
        self.assertFalse(tag_enrichment_job.is_enrichment_running())

    def test_trigger_tag_enrichment_while_running_is_409(self):
        tag_enrichment_job._RUN_LOCK.acquire()
        try:
            response = self.client.post("/api/batch/tag-enrichment")
        finally:
            tag_enrichment_job._RUN_LOCK.release()

        self.assertEqual(response.status_code, 409)
        self.runner.assert_not_called()


if __name__ == "__main__":
    unittest.main()
