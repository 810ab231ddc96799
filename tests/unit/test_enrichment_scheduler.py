"""
태그 보강 스케줄러 단위 테스트
"""

import unittest
from unittest.mock import Mock

from app.core.error_handling import ConfigurationError
from app.schedulers.enrichment_scheduler import ENRICHMENT_JOB_ID, EnrichmentScheduler
from config.settings import EnrichmentConfig


class TestEnrichmentScheduler(unittest.TestCase):
    """태그 보강 스케줄러 테스트"""

    def test_register_job(self):
        scheduler = EnrichmentScheduler(
            config=EnrichmentConfig(schedule="0 3 * * *"), job_function=Mock()
        )

        job_id = scheduler.register_job()

        self.assertEqual(job_id, ENRICHMENT_JOB_ID)
        job = scheduler.scheduler.get_job(ENRICHMENT_JOB_ID)
        self.assertEqual(job.max_instances, 1)
        self.assertTrue(job.coalesce)

    def test_invalid_expression(self):
        scheduler = EnrichmentScheduler(
            config=EnrichmentConfig(schedule="every night"), job_function=Mock()
        )

        with self.assertRaises(ConfigurationError):
            scheduler.register_job()

    def test_start_without_schedule(self):
        scheduler = EnrichmentScheduler(config=EnrichmentConfig(schedule=""), job_function=Mock())

        self.assertFalse(scheduler.start())
        self.assertFalse(scheduler.is_running)

    def test_start_and_shutdown(self):
        scheduler = EnrichmentScheduler(
            config=EnrichmentConfig(schedule="*/30 * * * *"), job_function=Mock()
        )

        self.assertTrue(scheduler.start())
        try:
            self.assertTrue(scheduler.is_running)
            jobs = scheduler.get_jobs()
            self.assertEqual(len(jobs), 1)
            self.assertIsNotNone(jobs[0]["next_run_time"])
        finally:
            scheduler.shutdown()
        self.assertFalse(scheduler.is_running)


if __name__ == "__main__":
    unittest.main()
