"""
Status notifications for pipeline jobs.

Subscribers receive every event on their own queue; publishing never blocks.
"""

import queue
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional

from Tabular_to_Graph.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StatusEvent:
    job_id: str
    status: str
    step: Optional[str] = None
    error: Optional[str] = None
    timestamp: float = field(default_factory=time.time)


class StatusChannel:
    """Fan-out of status events to subscriber queues."""

    def __init__(self):
        self._subscribers: List[queue.Queue] = []
        self._lock = threading.Lock()

    def subscribe(self, maxsize: int = 0) -> queue.Queue:
        subscriber = queue.Queue(maxsize=maxsize)
        with self._lock:
            self._subscribers.append(subscriber)
        return subscriber

    def unsubscribe(self, subscriber: queue.Queue) -> None:
        with self._lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, event: StatusEvent) -> None:
        target = f"{event.job_id}/{event.step}" if event.step else event.job_id
        if event.error:
            logger.info(f"Status {target}: {event.status} ({event.error})")
        else:
            logger.info(f"Status {target}: {event.status}")

        with self._lock:
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            try:
                subscriber.put_nowait(event)
            except queue.Full:
                logger.warning(f"Dropping status event for {target}: subscriber queue is full")
