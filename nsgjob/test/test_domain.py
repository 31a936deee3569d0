"""
Tests for domain models.
"""

import unittest

import pytest

from nsgjob.domain import JobDetails, JobSummary, filter_jobs, sort_jobs


def job(jobId, submitted=None, tool=None, stage=None, completed=None):
    return JobSummary(
        job_id=jobId,
        url="https://host/job/alice/" + jobId,
        tool=tool,
        job_stage=stage,
        date_submitted=submitted,
        date_completed=completed)


JOBS = [
    job("NGBW-JOB-1", "2024-01-01T10:00:00-08:00", "NEURON_EXPANSE", "COMPLETED"),
    job("NGBW-JOB-2", "2024-03-01T10:00:00-08:00", "PY_EXPANSE", "QUEUE"),
    job("NGBW-JOB-3", None, "BLUEPYOPT", "SUBMITTED"),
    job("NGBW-JOB-4", "2024-02-01T10:00:00Z", "NEURON_EXPANSE", "RUNNING"),
]


class TestJobSummary(unittest.TestCase):
    def test_timestamps(self):
        summary = JOBS[0]
        self.assertEqual(2024, summary.submitted_at().year)
        self.assertIsNone(summary.completed_at())

    def test_unparseable_timestamp(self):
        self.assertIsNone(job("x", "yesterday").submitted_at())

    def test_str(self):
        text = str(JOBS[1])
        self.assertIn("NGBW-JOB-2", text)
        self.assertIn("PY_EXPANSE", text)
        failed = job("NGBW-JOB-5", stage="COMPLETED")
        failed.failed = True
        self.assertIn("COMPLETED (failed)", str(failed))


class TestJobDetails(unittest.TestCase):
    def test_finished(self):
        details = JobDetails(
            job_id="NGBW-JOB-1", job_stage="RUNNING", failed=False,
            date_submitted=None, self_uri="https://host/job/alice/NGBW-JOB-1")
        self.assertFalse(details.is_finished())
        details.terminal_stage = True
        self.assertTrue(details.is_finished())


@pytest.mark.parametrize('query, expected', [
    ('', ['NGBW-JOB-1', 'NGBW-JOB-2', 'NGBW-JOB-3', 'NGBW-JOB-4']),
    ('neuron', ['NGBW-JOB-1', 'NGBW-JOB-4']),
    ('queue', ['NGBW-JOB-2']),
    ('2024-03', ['NGBW-JOB-2']),
    ('job-3', ['NGBW-JOB-3']),
    ('nothing', []),
])
def testFilterJobs(query, expected):
    assert [j.job_id for j in filter_jobs(JOBS, query)] == expected


def testSortNewestFirst():
    ordered = sort_jobs(JOBS)
    assert [j.job_id for j in ordered] == [
        'NGBW-JOB-2', 'NGBW-JOB-4', 'NGBW-JOB-1', 'NGBW-JOB-3']


def testSortOldestFirstMissingLast():
    ordered = sort_jobs(JOBS, "date_submitted", descending=False)
    assert [j.job_id for j in ordered] == [
        'NGBW-JOB-1', 'NGBW-JOB-4', 'NGBW-JOB-2', 'NGBW-JOB-3']


def testSortByTool():
    ordered = sort_jobs(JOBS, "tool", descending=False)
    assert [j.tool for j in ordered] == [
        'BLUEPYOPT', 'NEURON_EXPANSE', 'NEURON_EXPANSE', 'PY_EXPANSE']


def testSortIsStable():
    ordered = sort_jobs(JOBS, "date_completed")
    assert [j.job_id for j in ordered] == [j.job_id for j in JOBS]


def testSortUnknownField():
    with pytest.raises(ValueError):
        sort_jobs(JOBS, "url")
