"""jobs: Choose the inventory job whose output can be trusted

Use select_job() on the jobs listed for a vault. It refuses to choose while an
inventory retrieval is still running, and otherwise returns the completed
inventory retrieval that finished last.
"""

import collections
import datetime
import logging

import botocore.utils

from glacier_emptier.errors import JobInProgress, NoCompletedJob


ACTION_INVENTORY_RETRIEVAL = 'InventoryRetrieval'
ACTION_ARCHIVE_RETRIEVAL = 'ArchiveRetrieval'

logger = logging.getLogger(__name__)


Job = collections.namedtuple('Job', ['job_id', 'action', 'completed', 'completion_date'])


def parse_timestamp(value):
    """parse_timestamp(): Parse a timestamp as returned by Glacier ('2012-05-15T17:21:39.339Z').

    Parsing is left to botocore. A timestamp without offset is taken as UTC.
    Returns None for None or ''.
    Raises ValueError on anything else that is not a timestamp.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime.datetime):
        return value
    if not isinstance(value, str):
        raise ValueError('not a timestamp: {!r}'.format(value))

    timestamp = botocore.utils.parse_timestamp(value)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=datetime.timezone.utc)
    return timestamp


def job_from_description(description):
    """job_from_description(): Build a Job from an entry of the ListJobs JobList.
    """
    return Job(
        job_id=description['JobId'],
        action=description.get('Action'),
        completed=bool(description.get('Completed')),
        completion_date=parse_timestamp(description.get('CompletionDate')),
    )


def _completion_key(job):
    # Completed jobs without a date lose against any dated job
    if job.completion_date is None:
        return (0, datetime.datetime.min.replace(tzinfo=datetime.timezone.utc))
    return (1, job.completion_date)


def select_job(jobs):
    """select_job(): Return the latest completed inventory retrieval job.

    Raises JobInProgress if any inventory retrieval job is not completed,
    NoCompletedJob if there is no inventory retrieval job at all.
    On equal completion dates, the first job in `jobs` wins.
    """
    inventory_jobs = [job for job in jobs if job.action == ACTION_INVENTORY_RETRIEVAL]

    for job in inventory_jobs:
        if not job.completed:
            raise JobInProgress(job.job_id)

    if not inventory_jobs:
        raise NoCompletedJob()

    # max() keeps the first maximal element
    latest_job = max(inventory_jobs, key=_completion_key)
    logger.debug('Selected job {} completed on {}'.format(latest_job.job_id, latest_job.completion_date))

    return latest_job
