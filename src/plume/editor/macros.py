# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import logging
import typing

from ..device.hwtypes import TerminalEvent

logger = logging.getLogger(__name__)


class MacroManager:
    """Records raw input events and plays them back.

    Recording and playing never overlap: starting playback ends any recording, and a recording cannot begin
    while a macro is playing.
    """

    events: list[TerminalEvent]

    def __init__(self):
        self.recording = False
        self.playing = False
        self.events = []
        self.cursor = 0
        self.remaining = 0

    def record(self):
        if self.recording or self.playing:
            return
        self.events = []
        self.recording = True
        logger.debug("Macro recording started")

    def register(self, event: TerminalEvent):
        if self.recording:
            self.events.append(event)

    def discard(self, event: TerminalEvent):
        # used to keep the keystroke that stopped a recording out of the macro
        if self.recording and self.events and self.events[-1] is event:
            self.events.pop()

    def finish(self):
        if self.recording:
            logger.debug("Macro recording finished with %d events", len(self.events))
        self.recording = False
        self.playing = False
        self.remaining = 0

    def play(self, times: int = 1):
        self.recording = False
        if not self.events or times < 1:
            return
        self.playing = True
        self.cursor = 0
        self.remaining = times - 1

    def next(self) -> typing.Optional[TerminalEvent]:
        if not self.playing:
            return None
        if self.cursor == len(self.events):
            if self.remaining == 0:
                self.playing = False
                return None
            self.remaining -= 1
            self.cursor = 0
        event = self.events[self.cursor]
        self.cursor += 1
        return event
