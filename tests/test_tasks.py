import pytest

from apps.lifecycle.signals import creator_data_purge_requested
from apps.lifecycle.tasks import PURGE_MAX_RETRIES, purge_creator_data

purged = []


def record_purge(creator_id):
    purged.append(creator_id)


def failing_purge(creator_id):
    raise RuntimeError("storage unavailable")


@pytest.fixture(autouse=True)
def reset_purged():
    purged.clear()


def test_purge_calls_configured_handler(settings):
    settings.CREATOR_DATA_PURGE_HANDLER = 'tests.test_tasks.record_purge'

    result = purge_creator_data(42)

    assert purged == [42]
    assert result == "Data purged for creator 42"


def test_purge_failure_propagates(settings):
    settings.CREATOR_DATA_PURGE_HANDLER = 'tests.test_tasks.failing_purge'

    with pytest.raises(RuntimeError):
        purge_creator_data(42)


def test_purge_failures_are_retried_with_backoff():
    assert purge_creator_data.autoretry_for == (Exception,)
    assert purge_creator_data.max_retries == PURGE_MAX_RETRIES
    assert purge_creator_data.retry_backoff is True


def test_default_handler_sends_signal(settings):
    settings.CREATOR_DATA_PURGE_HANDLER = 'apps.lifecycle.signals.request_creator_data_purge'
    received = []

    def receiver(sender, creator_id, **kwargs):
        received.append(creator_id)

    creator_data_purge_requested.connect(receiver)
    try:
        purge_creator_data(7)
    finally:
        creator_data_purge_requested.disconnect(receiver)

    assert received == [7]
