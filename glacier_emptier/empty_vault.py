"""empty_vault: Empty a vault from its latest inventory

Use empty_vault() to run the whole workflow: list the jobs of the vault,
select the latest completed inventory retrieval, read its output and delete
every archive it lists. It returns a Summary, or raises a RunFailed.
"""

import collections
import logging
import threading
import time

from glacier_emptier.deletion import LoggingObserver, delete_all
from glacier_emptier.errors import ListJobsFailed, RunCancelled, TransportError
from glacier_emptier.inventory import fetch_inventory
from glacier_emptier.jobs import select_job


logger = logging.getLogger(__name__)


# Possible values for the run state
STATE_IDLE = 'idle'
STATE_JOBS_LISTED = 'jobs_listed'
STATE_JOB_SELECTED = 'job_selected'
STATE_INVENTORY_FETCHED = 'inventory_fetched'
STATE_DELETING = 'deleting'
STATE_DONE = 'done'
STATE_FAILED = 'failed'


class Summary(collections.namedtuple('Summary', ['total', 'succeeded', 'failed', 'failures'])):
    """Summary: counts of a run, `failures` is a list of (archive_id, error) in processing order.
    """

    @classmethod
    def from_outcomes(cls, outcomes):
        failures = [(outcome.archive_id, outcome.error) for outcome in outcomes if not outcome.succeeded]
        return cls(
            total=len(outcomes),
            succeeded=len(outcomes) - len(failures),
            failed=len(failures),
            failures=failures,
        )

    @property
    def failed_ids(self):
        return [archive_id for archive_id, _ in self.failures]


class CancelToken:
    """CancelToken: cancel a run from another thread or after a deadline.

    timeout: seconds from now after which the token counts as cancelled, None for no deadline
    """

    def __init__(self, timeout=None):
        self._event = threading.Event()
        self._deadline = None if timeout is None else time.monotonic() + timeout

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self):
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def raise_if_cancelled(self, step):
        if self.cancelled:
            raise RunCancelled(step)


class VaultEmptier:
    """VaultEmptier: one run against one vault.

    `state` goes idle -> jobs_listed -> job_selected -> inventory_fetched -> deleting -> done,
    or to failed from any step before done.
    """

    def __init__(self, storage, vault, observer=None, cancel=None):
        self.storage = storage
        self.vault = vault
        self.observer = observer or LoggingObserver()
        self.cancel = cancel or CancelToken()
        self.state = STATE_IDLE
        self.outcomes = []

    def run(self):
        try:
            return self._run()
        except Exception:
            self.state = STATE_FAILED
            raise

    def _run(self):
        self.cancel.raise_if_cancelled('listing jobs')
        try:
            jobs = self.storage.list_jobs(self.vault)
        except TransportError as exception:
            raise ListJobsFailed(self.vault, exception) from exception
        self.state = STATE_JOBS_LISTED

        # No inventory job is started here, and a running one is not waited for
        job = select_job(jobs)
        self.state = STATE_JOB_SELECTED
        logger.info('Using inventory job {} completed on {}'.format(job.job_id, job.completion_date))

        self.cancel.raise_if_cancelled('fetching the inventory')
        records = fetch_inventory(self.storage, self.vault, job)
        self.state = STATE_INVENTORY_FETCHED

        self.state = STATE_DELETING
        try:
            self.outcomes = delete_all(self.storage, self.vault, records, observer=self.observer, cancel=self.cancel)
        except RunCancelled as exception:
            self.outcomes = exception.outcomes
            raise
        self.state = STATE_DONE

        summary = Summary.from_outcomes(self.outcomes)
        logger.info('Processed {} archives of vault {}: {} deleted, {} failed'.format(
            summary.total, self.vault, summary.succeeded, summary.failed))

        return summary


def empty_vault(storage, vault, observer=None, cancel=None):
    """empty_vault(): Delete every archive listed by the latest inventory of `vault`.
    """
    return VaultEmptier(storage, vault, observer=observer, cancel=cancel).run()
