"""errors: Exceptions raised while emptying a vault

Every RunFailed subclass aborts the run before (or between) deletions.
A single archive that cannot be deleted is not an exception past the
deletion step, it is recorded as a failed DeletionOutcome.
"""


class EmptierError(Exception):
    pass


class ConfigurationError(EmptierError):
    pass


class TransportError(EmptierError):
    """TransportError: a call to the archival storage failed.

    operation: name of the storage call ('list_jobs', 'get_job_output', 'delete_archive')
    code: AWS error code when the service answered with one
    """

    def __init__(self, operation, detail, code=None):
        super().__init__('{} failed: {}'.format(operation, detail))
        self.operation = operation
        self.detail = detail
        self.code = code


class RunFailed(EmptierError):
    pass


class ListJobsFailed(RunFailed):
    def __init__(self, vault, cause):
        super().__init__('unable to list jobs of vault {}: {}'.format(vault, cause))
        self.vault = vault
        self.cause = cause


class JobInProgress(RunFailed):
    def __init__(self, job_id):
        super().__init__('there is a running inventory job with JobId {}'.format(job_id))
        self.job_id = job_id


class NoCompletedJob(RunFailed):
    def __init__(self):
        super().__init__('unable to find a completed inventory job')


class OutputFetchFailed(RunFailed):
    def __init__(self, job_id, cause):
        super().__init__('error getting output of job {}: {}'.format(job_id, cause))
        self.job_id = job_id
        self.cause = cause


class InventoryParseFailed(RunFailed):
    pass


class RunCancelled(RunFailed):
    """RunCancelled: the run was cancelled or ran out of time.

    outcomes: the DeletionOutcome list recorded before cancellation, if deletion had started
    """

    def __init__(self, step, outcomes=None):
        super().__init__('run cancelled before {}'.format(step))
        self.step = step
        self.outcomes = outcomes or []
