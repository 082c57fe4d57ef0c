import datetime
import json

import pytest

from glacier_emptier.deletion import DeletionObserver
from glacier_emptier.errors import TransportError
from glacier_emptier.jobs import Job


class FakeStorage:
    """In-memory archival storage recording every call."""

    def __init__(self, jobs=None, outputs=None, archives=None, failing=None):
        self.jobs = list(jobs or [])
        self.outputs = dict(outputs or {})
        self.archives = set(archives or [])
        # archive_id -> error code for deletions that must fail
        self.failing = dict(failing or {})
        self.list_jobs_error = None
        self.calls = []

    def list_jobs(self, vault):
        self.calls.append(('list_jobs', vault))
        if self.list_jobs_error:
            raise self.list_jobs_error
        return list(self.jobs)

    def get_job_output(self, vault, job_id):
        self.calls.append(('get_job_output', vault, job_id))
        if job_id not in self.outputs:
            raise TransportError('get_job_output', 'job {} not found'.format(job_id), code='ResourceNotFoundException')
        return self.outputs[job_id]

    def delete_archive(self, vault, archive_id):
        self.calls.append(('delete_archive', vault, archive_id))
        if archive_id in self.failing:
            raise TransportError('delete_archive', 'cannot delete {}'.format(archive_id), code=self.failing[archive_id])
        if archive_id not in self.archives:
            raise TransportError('delete_archive', 'archive {} not found'.format(archive_id), code='ResourceNotFoundException')
        self.archives.remove(archive_id)

    @property
    def deleted(self):
        return [call[2] for call in self.calls if call[0] == 'delete_archive']


class RecordingObserver(DeletionObserver):

    def __init__(self):
        self.events = []

    def archive_deleted(self, vault, archive_id):
        self.events.append(('deleted', vault, archive_id))

    def archive_failed(self, vault, archive_id, error):
        self.events.append(('failed', vault, archive_id, error.code))


def make_job(job_id, completion_date=None, completed=True, action='InventoryRetrieval'):
    if isinstance(completion_date, str):
        completion_date = datetime.datetime.fromisoformat(completion_date.replace('Z', '+00:00'))
    return Job(job_id=job_id, action=action, completed=completed, completion_date=completion_date)


def make_inventory(archive_ids, vault_arn='arn:aws:glacier:us-east-1:012345678901:vaults/v1'):
    return json.dumps({
        'VaultARN': vault_arn,
        'InventoryDate': '2023-02-01T00:00:00Z',
        'ArchiveList': [
            {
                'ArchiveId': archive_id,
                'ArchiveDescription': 'archive {}'.format(archive_id),
                'CreationDate': '2022-12-24T10:00:00.000Z',
                'Size': 1024,
                'SHA256TreeHash': 'beb0fe31a1c7ca8c6c04d574ea906e3f97b31fdca7571defb5b44dca89b5af60',
            }
            for archive_id in archive_ids
        ],
    }).encode('utf-8')


@pytest.fixture
def observer():
    return RecordingObserver()
