from datetime import timedelta

import pytest

from plume.editor.tasks import TaskScheduler


def test_nothing_due_before_interval():
    tasks = TaskScheduler()
    tasks.schedule("tick", timedelta(seconds=1), now=10.0)
    assert tasks.due(10.5) == []
    assert tasks.due(11.0) == ["tick"]


def test_due_advances_next_time():
    tasks = TaskScheduler()
    tasks.schedule("tick", timedelta(seconds=1), now=0.0)
    assert tasks.due(1.2) == ["tick"]
    assert tasks.due(1.5) == []
    assert tasks.due(2.2) == ["tick"]


def test_entries_survive_being_due():
    tasks = TaskScheduler()
    tasks.schedule("a", timedelta(milliseconds=100), now=0.0)
    tasks.schedule("b", timedelta(seconds=5), now=0.0)
    assert tasks.due(1.0) == ["a"]
    assert tasks.names == ["a", "b"]


def test_reschedule_replaces():
    tasks = TaskScheduler()
    tasks.schedule("a", timedelta(seconds=1), now=0.0)
    tasks.schedule("a", timedelta(seconds=10), now=0.0)
    assert tasks.names == ["a"]
    assert tasks.due(5.0) == []


def test_cancel():
    tasks = TaskScheduler()
    tasks.schedule("a", timedelta(seconds=1), now=0.0)
    assert tasks.cancel("a")
    assert not tasks.cancel("a")
    assert tasks.due(100.0) == []


def test_interval_must_be_positive():
    tasks = TaskScheduler()
    with pytest.raises(ValueError):
        tasks.schedule("a", timedelta(), now=0.0)


def test_tasks_may_schedule_tasks_while_running():
    tasks = TaskScheduler()
    tasks.schedule("a", timedelta(seconds=1), now=0.0)
    for name in tasks.due(1.0):
        # would deadlock if the table were still locked
        tasks.schedule(f"{name}-child", timedelta(seconds=1), now=1.0)
        tasks.cancel(name)
    assert tasks.names == ["a-child"]
