"""
여행지-태그 연결 저장소 단위 테스트
"""

import unittest

from app.core.database_manager import DatabaseManager
from app.models import Tag, TourSpot, TourSpotTag
from app.services.spot_tag_store import SpotTagLinkStore
from config.settings import DatabaseConfig


class TestSpotTagLinkStore(unittest.TestCase):
    """여행지-태그 연결 저장소 테스트"""

    def setUp(self):
        self.db_manager = DatabaseManager(
            DatabaseConfig(host="", user="", password="", database="", url="sqlite://")
        )
        self.db_manager.create_tables()

        with self.db_manager.get_session() as session:
            spot = TourSpot(content_id="500", title="Sunny Beach", area_code="1")
            other = TourSpot(content_id="501", title="Moon Hill", area_code="1")
            beach = Tag(name="beach")
            sunset = Tag(name="sunset")
            session.add_all([spot, other, beach, sunset])
            session.flush()
            session.add_all(
                [
                    TourSpotTag(tour_spot_id=spot.id, tag_id=beach.id),
                    TourSpotTag(tour_spot_id=other.id, tag_id=beach.id),
                ]
            )
            self.spot_id, self.other_id = spot.id, other.id

    def tearDown(self):
        self.db_manager.dispose()

    def test_delete_all_for_spot(self):
        with self.db_manager.get_session() as session:
            deleted = SpotTagLinkStore(session).delete_all_for_spot(self.spot_id)
            self.assertEqual(deleted, 1)

        with self.db_manager.get_session() as session:
            store = SpotTagLinkStore(session)
            self.assertEqual(store.tag_names_for_spot(self.spot_id), [])
            # 다른 여행지의 연결은 유지
            self.assertEqual(store.tag_names_for_spot(self.other_id), ["beach"])

    def test_delete_all_for_spot_without_links(self):
        with self.db_manager.get_session() as session:
            store = SpotTagLinkStore(session)
            store.delete_all_for_spot(self.spot_id)
            self.assertEqual(store.delete_all_for_spot(self.spot_id), 0)

    def test_replace_for_spot_deduplicates_tags(self):
        """같은 태그가 여러 번 주어져도 연결은 하나"""
        with self.db_manager.get_session() as session:
            spot = session.get(TourSpot, self.spot_id)
            sunset = session.query(Tag).filter_by(name="sunset").one()
            links = SpotTagLinkStore(session).replace_for_spot(spot, [sunset, sunset])
            self.assertEqual(len(links), 1)

        with self.db_manager.get_session() as session:
            self.assertEqual(
                SpotTagLinkStore(session).tag_names_for_spot(self.spot_id), ["sunset"]
            )
            self.assertEqual(
                session.query(TourSpotTag).filter_by(tour_spot_id=self.spot_id).count(), 1
            )

    def test_replace_for_spot_with_no_tags_clears(self):
        with self.db_manager.get_session() as session:
            spot = session.get(TourSpot, self.spot_id)
            links = SpotTagLinkStore(session).replace_for_spot(spot, [])
            self.assertEqual(links, [])
            self.assertEqual(spot.tag_names, [])

    def test_save_all_empty(self):
        with self.db_manager.get_session() as session:
            self.assertEqual(SpotTagLinkStore(session).save_all([]), 0)


if __name__ == "__main__":
    unittest.main()
