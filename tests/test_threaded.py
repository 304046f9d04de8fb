"""Tests for the threaded transport bridge."""

import threading
from unittest.mock import Mock

import pytest

from pollsub.adapters.threaded import ThreadedPublisher, ThreadedSubscriber, WorkerThread
from pollsub.models.response import PullResponse, PublishFuture
from pollsub.protocols.publisher import AsyncPubSubPublisher


class RecordingSubscriber:
    """Blocking subscriber recording the thread each call ran on."""

    def __init__(self):
        self.threads = []

    def pull(self, request, timeout):
        self.threads.append(threading.current_thread().name)
        return PullResponse(received_messages=[])

    def acknowledge(self, request):
        self.threads.append(threading.current_thread().name)

    def modify_ack_deadline(self, request):
        self.threads.append(threading.current_thread().name)

    def delete(self, subscription):
        self.threads.append(threading.current_thread().name)


class TestThreadedSubscriber:
    """Test ThreadedSubscriber class."""

    @pytest.mark.asyncio
    async def test_calls_are_forwarded(self):
        """Each async call forwards its arguments to the blocking subscriber."""
        subscriber = Mock()
        subscriber.pull.return_value = PullResponse(received_messages=[])
        threaded = ThreadedSubscriber(subscriber)
        request = {"subscription": "sub", "max_messages": 1, "return_immediately": False}

        response = await threaded.pull(request=request, timeout=5.0)
        await threaded.acknowledge(request={"subscription": "sub", "ack_ids": ["a1"]})
        await threaded.modify_ack_deadline(
            request={"subscription": "sub", "ack_ids": ["a1"], "ack_deadline_seconds": 0}
        )
        await threaded.delete("sub")

        assert response == PullResponse(received_messages=[])
        subscriber.pull.assert_called_once_with(request=request, timeout=5.0)
        subscriber.acknowledge.assert_called_once_with(request={"subscription": "sub", "ack_ids": ["a1"]})
        subscriber.modify_ack_deadline.assert_called_once()
        subscriber.delete.assert_called_once_with("sub")
        threaded.close()

    @pytest.mark.asyncio
    async def test_calls_share_one_worker_thread(self):
        """All calls run on the same thread, never the event loop's."""
        subscriber = RecordingSubscriber()
        threaded = ThreadedSubscriber(subscriber)

        await threaded.pull(request={"subscription": "sub", "max_messages": 1, "return_immediately": True}, timeout=1)
        await threaded.acknowledge(request={"subscription": "sub", "ack_ids": ["a1"]})
        await threaded.delete("sub")

        assert len(set(subscriber.threads)) == 1
        assert subscriber.threads[0] != threading.current_thread().name
        assert subscriber.threads[0].startswith("pollsub-subscriber")
        threaded.close()

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        """Exceptions raised on the worker thread reach the awaiting caller."""
        subscriber = Mock()
        subscriber.pull.side_effect = ConnectionError("gone")
        threaded = ThreadedSubscriber(subscriber)

        with pytest.raises(ConnectionError):
            await threaded.pull(request={"subscription": "sub", "max_messages": 1, "return_immediately": False}, timeout=1)
        threaded.close()


class TestThreadedPublisher:
    """Test ThreadedPublisher class."""

    @pytest.mark.asyncio
    async def test_publish_is_forwarded(self):
        """publish() forwards topic, data and attributes."""
        publisher = Mock()
        publisher.publish.return_value = PublishFuture(message_id="m1")
        threaded = ThreadedPublisher(publisher)

        future = await threaded.publish("orders", b"data", attributes={"a": "b"})

        assert future.result() == "m1"
        publisher.publish.assert_called_once_with("orders", b"data", attributes={"a": "b"})
        threaded.close()

    @pytest.mark.asyncio
    async def test_publish_without_attributes_passes_none(self):
        """Attributes default to None on the worker thread call."""
        publisher = Mock()
        publisher.publish.return_value = PublishFuture(message_id="m2")
        threaded = ThreadedPublisher(publisher)

        await threaded.publish("orders", b"data")

        publisher.publish.assert_called_once_with("orders", b"data", attributes=None)
        assert isinstance(threaded, AsyncPubSubPublisher)
        threaded.close()

    @pytest.mark.asyncio
    async def test_shared_worker(self):
        """A publisher and a subscriber can share one worker thread."""
        worker = WorkerThread("shared")
        subscriber = RecordingSubscriber()
        threads = []
        publisher = Mock()
        publisher.publish.side_effect = lambda *args, **kwargs: threads.append(threading.current_thread().name)

        await ThreadedSubscriber(subscriber, worker=worker).delete("sub")
        await ThreadedPublisher(publisher, worker=worker).publish("orders", b"x")

        assert subscriber.threads == threads
        worker.shutdown()
