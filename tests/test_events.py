from datetime import timedelta

import trio

from plume.commontypes import Size
from plume.device.hwtypes import KeyEvent, KeyPress, KeyCode
from plume.editor.feedback import Feedback

TICKER = """
ticks = 0

def tick():
    global ticks
    ticks += 1
"""


def released(character: str):
    return KeyEvent(key=KeyCode.CHAR, character=character, press=KeyPress.RELEASED)


def queue_macro(editor, *events):
    macros = editor.macro_man
    macros.record()
    for event in events:
        macros.register(event)
    macros.finish()
    macros.play()


async def send_later(channel, event, delay):
    await trio.sleep(delay)
    await channel.send(event)


async def test_plain_mode_skips_releases(editor, keyboard, hardware):
    keyboard.send_nowait(released("a"))
    keyboard.send_nowait(KeyEvent.char("b"))
    assert await editor.events.acquire_event() == KeyEvent.char("b")
    assert hardware.reads == 2


async def test_recording_is_transparent(editor, keyboard):
    editor.macro_man.record()
    keyboard.send_nowait(KeyEvent.char("a"))
    event = await editor.events.acquire_event()
    assert event == KeyEvent.char("a")
    assert editor.macro_man.events == [event]


async def test_macro_events_come_first(editor, keyboard, hardware):
    queue_macro(editor, KeyEvent.char("m"), KeyEvent.char("n"))
    keyboard.send_nowait(KeyEvent.char("l"))
    assert await editor.events.acquire_event() == KeyEvent.char("m")
    assert await editor.events.acquire_event() == KeyEvent.char("n")
    assert hardware.reads == 0
    assert await editor.events.acquire_event() == KeyEvent.char("l")
    assert not editor.macro_man.playing


async def test_tasks_run_while_waiting(editor, keyboard, autojump_clock):
    await editor.host.execute(TICKER)
    editor.schedule_task("tick", timedelta(milliseconds=200))
    async with trio.open_nursery() as nursery:
        nursery.start_soon(send_later, keyboard, KeyEvent.char("k"), 1)
        event = await editor.events.acquire_scheduled_event()
    assert event == KeyEvent.char("k")
    assert 3 <= editor.host.namespace["ticks"] <= 5
    assert editor.feedback.is_none


async def test_scheduled_mode_skips_releases(editor, keyboard, autojump_clock):
    keyboard.send_nowait(released("a"))
    keyboard.send_nowait(KeyEvent.char("b"))
    assert await editor.events.acquire_scheduled_event() == KeyEvent.char("b")


async def test_missing_task_function_warns(editor, keyboard, autojump_clock):
    editor.schedule_task("nothing_here", timedelta(milliseconds=100))
    async with trio.open_nursery() as nursery:
        nursery.start_soon(send_later, keyboard, KeyEvent.char("k"), 0.5)
        await editor.events.acquire_scheduled_event()
    assert editor.feedback == Feedback.warning("Function 'nothing_here' was not found")


async def test_failing_task_reports_error(editor, keyboard, autojump_clock):
    await editor.host.execute("def broken():\n    raise RuntimeError('task fell over')\n")
    editor.schedule_task("broken", timedelta(milliseconds=100))
    async with trio.open_nursery() as nursery:
        nursery.start_soon(send_later, keyboard, KeyEvent.char("k"), 0.5)
        await editor.events.acquire_scheduled_event()
    assert editor.feedback == Feedback.error("task fell over")


async def test_playing_macro_skips_tasks_and_input(editor, keyboard, hardware, autojump_clock):
    await editor.host.execute(TICKER)
    editor.schedule_task("tick", timedelta(milliseconds=10))
    await trio.sleep(1)
    queue_macro(editor, KeyEvent.char("a"), KeyEvent.char("b"))
    keyboard.send_nowait(KeyEvent.char("z"))
    first = await editor.events.acquire_scheduled_event()
    second = await editor.events.acquire_scheduled_event()
    assert [first, second] == [KeyEvent.char("a"), KeyEvent.char("b")]
    assert editor.host.namespace["ticks"] == 0
    assert hardware.polls == 0
    assert hardware.reads == 0


async def test_resize_while_waiting_rerenders(editor, keyboard, hardware, autojump_clock):
    hardware.take_resize()
    editor.needs_rerender = False

    async def resize_then_type():
        await trio.sleep(0.2)
        hardware.screen_size = Size(width=100, height=30)
        await trio.sleep(0.2)
        await keyboard.send(KeyEvent.char("k"))

    async with trio.open_nursery() as nursery:
        nursery.start_soon(resize_then_type)
        await editor.events.acquire_scheduled_event()
    assert hardware.flushed
    assert editor.doc.size == Size(width=100, height=27)
    assert not editor.needs_rerender
