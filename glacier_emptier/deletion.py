"""deletion: Delete every archive of an inventory, one at a time

A failed deletion is reported and recorded, then the next archive is
processed. Nothing is retried.
"""

import collections
import logging

from glacier_emptier.errors import RunCancelled, TransportError


logger = logging.getLogger(__name__)


DeletionOutcome = collections.namedtuple('DeletionOutcome', ['archive_id', 'succeeded', 'error'])


class DeletionObserver:
    """DeletionObserver: receives one call per processed archive.
    """

    def archive_deleted(self, vault, archive_id):
        pass

    def archive_failed(self, vault, archive_id, error):
        pass


class LoggingObserver(DeletionObserver):

    def __init__(self, logger=logger):
        self.logger = logger

    def archive_deleted(self, vault, archive_id):
        self.logger.info('deleted archive {}'.format(archive_id))

    def archive_failed(self, vault, archive_id, error):
        # Only log errors. Deletion goes on with the other archives.
        self.logger.error('failed to delete archive {}: {}'.format(archive_id, error))


def delete_archive(storage, vault, record, observer):
    """delete_archive(): Delete one archive and return its DeletionOutcome.
    """
    try:
        storage.delete_archive(vault, record.archive_id)
    except TransportError as exception:
        observer.archive_failed(vault, record.archive_id, exception)
        return DeletionOutcome(archive_id=record.archive_id, succeeded=False, error=str(exception))

    observer.archive_deleted(vault, record.archive_id)
    return DeletionOutcome(archive_id=record.archive_id, succeeded=True, error=None)


def delete_all(storage, vault, records, observer=None, cancel=None):
    """delete_all(): Delete the archives of `records` in order.

    Returns one DeletionOutcome per record, in the same order.
    If `cancel` is triggered, raises RunCancelled before the next deletion,
    carrying the outcomes recorded so far. Deleted archives stay deleted.
    """
    if observer is None:
        observer = LoggingObserver()

    outcomes = []
    for record in records:
        if cancel is not None and cancel.cancelled:
            raise RunCancelled('deleting archive {}'.format(record.archive_id), outcomes=outcomes)
        outcomes.append(delete_archive(storage, vault, record, observer))

    return outcomes
