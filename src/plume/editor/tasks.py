import datetime
import logging
import threading

import msgspec

from ..durations import format_duration

logger = logging.getLogger(__name__)


class ScheduledTask(msgspec.Struct):
    name: str
    interval: datetime.timedelta
    next_due: float


class TaskScheduler:
    """Named script functions to run every so often while the editor is idle.

    Times are plain floats from whatever clock the caller uses (the editor passes trio.current_time()).
    The lock covers the table only; callers run the due functions after due() has returned, so a task is
    free to schedule or cancel other tasks.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._tasks: dict[str, ScheduledTask] = {}

    @property
    def names(self) -> list[str]:
        with self._lock:
            return list(self._tasks)

    def schedule(self, name: str, interval: datetime.timedelta, now: float):
        if interval <= datetime.timedelta():
            raise ValueError(f"Task interval must be positive, not {format_duration(interval)}")
        with self._lock:
            self._tasks[name] = ScheduledTask(name=name, interval=interval, next_due=now + interval.total_seconds())
        logger.debug("Scheduled %s every %s", name, format_duration(interval))

    def cancel(self, name: str) -> bool:
        with self._lock:
            return self._tasks.pop(name, None) is not None

    def due(self, now: float) -> list[str]:
        with self._lock:
            ready = []
            for task in self._tasks.values():
                if task.next_due <= now:
                    ready.append(task.name)
                    task.next_due = now + task.interval.total_seconds()
            return ready
