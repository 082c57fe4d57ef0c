"""inventory: Retrieve and decode the output of an inventory retrieval job

The job output is a JSON document:

    {
        "VaultARN": "arn:aws:glacier:us-east-1:012345678901:vaults/examplevault",
        "InventoryDate": "2012-05-15T17:21:39Z",
        "ArchiveList": [
            {
                "ArchiveId": "...",
                "ArchiveDescription": "...",
                "CreationDate": "2012-05-15T17:19:46.620Z",
                "Size": 2140123,
                "SHA256TreeHash": "..."
            }
        ]
    }

Sizes and tree hashes are carried along but never checked.
"""

import collections
import json
import logging

from glacier_emptier.errors import InventoryParseFailed, OutputFetchFailed, TransportError
from glacier_emptier.jobs import parse_timestamp


logger = logging.getLogger(__name__)


InventoryRecord = collections.namedtuple(
    'InventoryRecord', ['archive_id', 'description', 'creation_date', 'size', 'sha256_tree_hash'])

Inventory = collections.namedtuple('Inventory', ['vault_arn', 'inventory_date', 'archives'])


def _parse_timestamp_field(data, field):
    try:
        return parse_timestamp(data.get(field))
    except ValueError as exception:
        raise InventoryParseFailed('invalid {}: {}'.format(field, exception)) from exception


def parse_record(position, data):
    if not isinstance(data, dict):
        raise InventoryParseFailed('archive #{} is not an object'.format(position))

    archive_id = data.get('ArchiveId')
    if not isinstance(archive_id, str) or not archive_id:
        raise InventoryParseFailed('archive #{} has no ArchiveId'.format(position))

    size = data.get('Size', 0)
    # bool is an int subclass, reject it explicitly
    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        raise InventoryParseFailed('archive {} has an invalid Size: {!r}'.format(archive_id, size))

    return InventoryRecord(
        archive_id=archive_id,
        description=data.get('ArchiveDescription') or '',
        creation_date=_parse_timestamp_field(data, 'CreationDate'),
        size=size,
        sha256_tree_hash=data.get('SHA256TreeHash') or '',
    )


def parse_inventory(body):
    """parse_inventory(): Decode a job output body (bytes or str) into an Inventory.

    The whole document is rejected with InventoryParseFailed as soon as one
    archive entry is unusable. Unknown fields are ignored.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode('utf-8')
        except UnicodeDecodeError as exception:
            raise InventoryParseFailed('inventory is not UTF-8: {}'.format(exception)) from exception

    try:
        data = json.loads(body)
    except ValueError as exception:
        raise InventoryParseFailed('error unmarshaling json: {}'.format(exception)) from exception

    if not isinstance(data, dict):
        raise InventoryParseFailed('inventory is not a JSON object')

    archive_list = data.get('ArchiveList')
    if archive_list is None:
        archive_list = []
    if not isinstance(archive_list, list):
        raise InventoryParseFailed('ArchiveList is not a list')

    archives = [parse_record(position, entry) for position, entry in enumerate(archive_list)]

    return Inventory(
        vault_arn=data.get('VaultARN') or '',
        inventory_date=_parse_timestamp_field(data, 'InventoryDate'),
        archives=archives,
    )


def fetch_inventory(storage, vault, job):
    """fetch_inventory(): Download the output of `job` and return its archive list.
    """
    logger.debug('Fetching output of job {} on vault {}...'.format(job.job_id, vault))
    try:
        body = storage.get_job_output(vault, job.job_id)
    except TransportError as exception:
        raise OutputFetchFailed(job.job_id, exception) from exception

    inventory = parse_inventory(body)
    logger.info('Inventory of {} taken on {}: {} archives'.format(
        inventory.vault_arn or vault, inventory.inventory_date, len(inventory.archives)))

    return inventory.archives
