import logging

import pytest

from glacier_emptier.deletion import DeletionOutcome, LoggingObserver, delete_all
from glacier_emptier.empty_vault import CancelToken
from glacier_emptier.errors import RunCancelled
from glacier_emptier.inventory import InventoryRecord

from conftest import FakeStorage


def make_records(archive_ids):
    return [InventoryRecord(archive_id, '', None, 0, '') for archive_id in archive_ids]


def test_delete_all_in_order(observer):
    storage = FakeStorage(archives=['x1', 'x2', 'x3'])

    outcomes = delete_all(storage, 'v1', make_records(['x3', 'x1', 'x2']), observer=observer)

    assert storage.calls == [
        ('delete_archive', 'v1', 'x3'),
        ('delete_archive', 'v1', 'x1'),
        ('delete_archive', 'v1', 'x2'),
    ]
    assert outcomes == [
        DeletionOutcome('x3', True, None),
        DeletionOutcome('x1', True, None),
        DeletionOutcome('x2', True, None),
    ]
    assert storage.archives == set()
    assert observer.events == [('deleted', 'v1', 'x3'), ('deleted', 'v1', 'x1'), ('deleted', 'v1', 'x2')]


def test_failure_does_not_stop_the_next_deletions(observer):
    storage = FakeStorage(archives=['x1', 'x2', 'x3', 'x4'], failing={'x2': 'ThrottlingException'})

    outcomes = delete_all(storage, 'v1', make_records(['x1', 'x2', 'x3', 'x4']), observer=observer)

    assert storage.deleted == ['x1', 'x2', 'x3', 'x4']
    assert [outcome.succeeded for outcome in outcomes] == [True, False, True, True]
    assert 'cannot delete x2' in outcomes[1].error
    assert observer.events[1] == ('failed', 'v1', 'x2', 'ThrottlingException')


def test_every_deletion_failing(observer):
    storage = FakeStorage()

    outcomes = delete_all(storage, 'v1', make_records(['x1', 'x2']), observer=observer)

    assert len(outcomes) == 2
    assert not any(outcome.succeeded for outcome in outcomes)


def test_duplicate_records_are_deleted_twice(observer):
    storage = FakeStorage(archives=['x1'])

    outcomes = delete_all(storage, 'v1', make_records(['x1', 'x1']), observer=observer)

    assert storage.deleted == ['x1', 'x1']
    assert [outcome.succeeded for outcome in outcomes] == [True, False]


def test_second_pass_records_not_found(observer):
    storage = FakeStorage(archives=['x1', 'x2'])
    records = make_records(['x1', 'x2'])

    first = delete_all(storage, 'v1', records, observer=observer)
    second = delete_all(storage, 'v1', records, observer=observer)

    assert all(outcome.succeeded for outcome in first)
    assert [outcome.succeeded for outcome in second] == [False, False]
    assert [event[3] for event in observer.events[2:]] == ['ResourceNotFoundException'] * 2


def test_no_records():
    storage = FakeStorage()

    assert delete_all(storage, 'v1', []) == []
    assert storage.calls == []


def test_cancel_stops_before_next_deletion(observer):
    cancel = CancelToken()

    class CancellingStorage(FakeStorage):
        def delete_archive(self, vault, archive_id):
            super().delete_archive(vault, archive_id)
            if archive_id == 'x2':
                cancel.cancel()

    storage = CancellingStorage(archives=['x1', 'x2', 'x3'])

    with pytest.raises(RunCancelled) as excinfo:
        delete_all(storage, 'v1', make_records(['x1', 'x2', 'x3']), observer=observer, cancel=cancel)

    assert storage.deleted == ['x1', 'x2']
    assert storage.archives == {'x3'}
    assert [outcome.archive_id for outcome in excinfo.value.outcomes] == ['x1', 'x2']


def test_logging_observer(caplog):
    storage = FakeStorage(archives=['x1'])

    with caplog.at_level(logging.INFO):
        delete_all(storage, 'v1', make_records(['x1', 'x2']), observer=LoggingObserver())

    messages = [(record.levelname, record.getMessage()) for record in caplog.records]
    assert ('INFO', 'deleted archive x1') in messages
    assert ('ERROR', 'failed to delete archive x2: delete_archive failed: archive x2 not found') in messages


def test_default_observer_logs(caplog):
    storage = FakeStorage(archives=['x1'])

    with caplog.at_level(logging.INFO, logger='glacier_emptier.deletion'):
        delete_all(storage, 'v1', make_records(['x1']))

    assert 'deleted archive x1' in caplog.text
