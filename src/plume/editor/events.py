# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

import trio

from ..device.hwtypes import KeyEvent, TerminalEvent
from ..scripting.errors import handle_script_result
from .feedback import Feedback

if typing.TYPE_CHECKING:
    from ..app import Editor

logger = logging.getLogger(__name__)


def _filtered(event: typing.Optional[TerminalEvent]):
    if event is None:
        return True
    return isinstance(event, KeyEvent) and event.is_release


class EventMultiplexer:
    """Decides where the next event comes from.

    A playing macro always wins; live input is not even looked at until playback is over. The main loop uses
    acquire_event(); anything that blocks on input from inside a script (prompts, mostly) uses
    acquire_scheduled_event(), which keeps background tasks running while it waits.
    """

    def __init__(self, editor: Editor):
        self.editor = editor

    async def resolve(self) -> typing.Optional[TerminalEvent]:
        macros = self.editor.macro_man
        if macros.playing:
            return macros.next()
        event = await self.editor.hardware.read()
        if event is not None:
            macros.register(event)
        return event

    async def acquire_event(self) -> TerminalEvent:
        while True:
            event = await self.resolve()
            if not _filtered(event):
                return event

    async def acquire_scheduled_event(self) -> TerminalEvent:
        editor = self.editor
        quantum = editor.settings.poll_quantum.total_seconds()
        while True:
            while not editor.macro_man.playing and not await editor.hardware.poll(quantum):
                await self.run_due_tasks()
                if editor.hardware.take_resize():
                    editor.needs_rerender = True
                    editor.render()
            event = await self.resolve()
            if not _filtered(event):
                return event

    async def run_due_tasks(self):
        editor = self.editor
        for name in editor.task_manager.due(trio.current_time()):
            result = await editor.host.call(name)
            if result is None:
                editor.feedback = Feedback.warning(f"Function '{name}' was not found")
                continue
            handle_script_result(editor, name, result)
