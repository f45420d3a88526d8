"""Tests for collection change notifications."""

import pytest

from cekap_app.repositories.change_feed import ACTIVITY_LOGS, CUSTOMERS, DOCUMENTS, ChangeFeed

from conftest import STAFF_AINA, motor_candidate, motor_draft


def test_watch_publish_and_unsubscribe() -> None:
    feed = ChangeFeed()
    seen = []
    unsubscribe = feed.watch(DOCUMENTS, seen.append)

    feed.publish(DOCUMENTS)
    feed.publish(CUSTOMERS)
    unsubscribe()
    feed.publish(DOCUMENTS)

    assert seen == [DOCUMENTS]


def test_failing_listener_does_not_block_others() -> None:
    feed = ChangeFeed()
    seen = []

    def broken(_collection):
        raise RuntimeError("widget already deleted")

    feed.watch(DOCUMENTS, broken)
    feed.watch(DOCUMENTS, seen.append)
    feed.publish(DOCUMENTS)

    assert seen == [DOCUMENTS]


def test_issuing_notifies_watchers(services, system_config) -> None:
    seen = []
    for collection in (DOCUMENTS, CUSTOMERS, ACTIVITY_LOGS):
        services.feed.watch(collection, seen.append)

    services.document_service.issue(motor_draft(), motor_candidate(), STAFF_AINA, system_config)

    assert seen == [CUSTOMERS, DOCUMENTS, ACTIVITY_LOGS]


def test_rolled_back_writes_are_not_announced(services, system_config) -> None:
    seen = []
    services.feed.watch(CUSTOMERS, seen.append)

    with pytest.raises(RuntimeError):
        with services.pool.transaction():
            services.customer_service.resolve(motor_candidate())
            raise RuntimeError("abort")

    assert seen == []
    assert services.customer_service.count_customers() == 0
