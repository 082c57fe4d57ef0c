"""glacier: Talk to AWS S3 Glacier

GlacierStorage is the only place where boto3 is called. Every botocore
failure comes out of it as a TransportError.
"""

import logging

import botocore.exceptions

from glacier_emptier.config import DEFAULT_ACCOUNT_ID, build_session
from glacier_emptier.errors import ConfigurationError, TransportError
from glacier_emptier.jobs import job_from_description


logger = logging.getLogger(__name__)


def _transport_error(operation, exception):
    code = None
    if isinstance(exception, botocore.exceptions.ClientError):
        code = exception.response.get('Error', {}).get('Code')
    return TransportError(operation, exception, code=code)


class GlacierStorage:

    def __init__(self, client, account_id=DEFAULT_ACCOUNT_ID):
        self.client = client
        self.account_id = account_id

    @classmethod
    def from_config(cls, run_config):
        """from_config(): Build the Glacier client for a RunConfig.

        Raises ConfigurationError when the profile or region cannot be loaded.
        """
        session = build_session(run_config)
        try:
            client = session.client('glacier')
        except botocore.exceptions.BotoCoreError as exception:
            raise ConfigurationError('unable to create Glacier client: {}'.format(exception)) from exception
        return cls(client, account_id=run_config.account_id)

    def list_jobs(self, vault):
        """list_jobs(): Return the Jobs of `vault`, all pages included.
        """
        jobs = []
        try:
            paginator = self.client.get_paginator('list_jobs')
            for page in paginator.paginate(accountId=self.account_id, vaultName=vault):
                jobs.extend(job_from_description(description) for description in page.get('JobList', []))
        except (botocore.exceptions.ClientError, botocore.exceptions.BotoCoreError) as exception:
            raise _transport_error('list_jobs', exception) from exception
        except (KeyError, ValueError) as exception:
            raise TransportError('list_jobs', 'invalid job description: {}'.format(exception)) from exception

        logger.debug('Found {} jobs on vault {}'.format(len(jobs), vault))
        return jobs

    def get_job_output(self, vault, job_id):
        """get_job_output(): Return the whole output of a job as bytes.
        """
        try:
            response = self.client.get_job_output(accountId=self.account_id, vaultName=vault, jobId=job_id)
            return response['body'].read()
        except (botocore.exceptions.ClientError, botocore.exceptions.BotoCoreError) as exception:
            raise _transport_error('get_job_output', exception) from exception

    def delete_archive(self, vault, archive_id):
        try:
            self.client.delete_archive(accountId=self.account_id, vaultName=vault, archiveId=archive_id)
        except (botocore.exceptions.ClientError, botocore.exceptions.BotoCoreError) as exception:
            raise _transport_error('delete_archive', exception) from exception
