"""
Tests for status event fan-out.
"""

import pytest

from Tabular_to_Graph.orchestration import StatusChannel, StatusEvent


@pytest.mark.unit
def test_every_subscriber_receives_events():
    channel = StatusChannel()
    first, second = channel.subscribe(), channel.subscribe()

    event = StatusEvent(job_id="job_1", step="dataLoading", status="started")
    channel.publish(event)

    assert first.get_nowait() is event
    assert second.get_nowait() is event


@pytest.mark.unit
def test_unsubscribed_queue_receives_nothing():
    channel = StatusChannel()
    subscriber = channel.subscribe()
    channel.unsubscribe(subscriber)
    channel.unsubscribe(subscriber)

    channel.publish(StatusEvent(job_id="job_1", status="started"))

    assert channel.subscriber_count == 0
    assert subscriber.empty()


@pytest.mark.unit
def test_full_subscriber_does_not_block_publishing():
    channel = StatusChannel()
    slow = channel.subscribe(maxsize=1)
    fast = channel.subscribe()

    for status in ("started", "completed"):
        channel.publish(StatusEvent(job_id="job_1", status=status))

    assert slow.qsize() == 1
    assert slow.get_nowait().status == "started"
    assert [fast.get_nowait().status for _ in range(2)] == ["started", "completed"]


@pytest.mark.unit
def test_events_are_immutable():
    event = StatusEvent(job_id="job_1", status="failed", error="boom")
    with pytest.raises(AttributeError):
        event.status = "completed"
