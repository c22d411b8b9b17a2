# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import abc
import codecs
import logging
from contextlib import aclosing, asynccontextmanager
from typing import Any, AsyncIterable, cast

import trio

from .hwtypes import KeyCode, KeyEvent, ModifierAnnotation, PasteEvent, TerminalEvent

logger = logging.getLogger(__name__)

ESC = "\x1b"
PASTE_START = "\x1b[200~"
PASTE_END = "\x1b[201~"

CSI_LETTERS = {
    "A": KeyCode.UP,
    "B": KeyCode.DOWN,
    "C": KeyCode.RIGHT,
    "D": KeyCode.LEFT,
    "H": KeyCode.HOME,
    "F": KeyCode.END,
    "Z": KeyCode.BACKTAB,
}

CSI_FUNCTION_LETTERS = {"P": 1, "Q": 2, "R": 3, "S": 4}

CSI_TILDES = {
    1: KeyCode.HOME,
    2: KeyCode.INSERT,
    3: KeyCode.DELETE,
    4: KeyCode.END,
    5: KeyCode.PAGEUP,
    6: KeyCode.PAGEDOWN,
    7: KeyCode.HOME,
    8: KeyCode.END,
}

CSI_TILDE_FUNCTIONS = {11: 1, 12: 2, 13: 3, 14: 4, 15: 5, 17: 6, 18: 7, 19: 8, 20: 9, 21: 10, 23: 11, 24: 12}

CONTROL_CHARACTERS = {
    "\r": KeyCode.ENTER,
    "\n": KeyCode.ENTER,
    "\t": KeyCode.TAB,
    "\x7f": KeyCode.BACKSPACE,
    "\x08": KeyCode.BACKSPACE,
}


def _modifiers_from_param(param: str) -> ModifierAnnotation:
    # xterm encodes modifiers as 1 + bitmask (shift=1, alt=2, ctrl=4)
    try:
        mask = int(param) - 1
    except ValueError:
        return ModifierAnnotation()
    return ModifierAnnotation(shift=bool(mask & 1), alt=bool(mask & 2), ctrl=bool(mask & 4))


def _with_alt(event: KeyEvent) -> KeyEvent:
    annotation = event.annotation
    return KeyEvent(
        key=event.key,
        character=event.character,
        function=event.function,
        annotation=ModifierAnnotation(alt=True, ctrl=annotation.ctrl, shift=annotation.shift),
    )


class KeyParser:
    """Turns chunks of terminal input into events.

    Terminals deliver an escape sequence within a single read, so an ESC at the very end of a chunk is the
    escape key itself. Bracketed pastes may span several chunks and are buffered until the closing marker.
    """

    def __init__(self):
        self.pasting = False
        self.paste_buffer: list[str] = []

    def feed(self, text: str) -> list[TerminalEvent]:
        events: list[TerminalEvent] = []
        i = 0
        while i < len(text):
            if self.pasting:
                end = text.find(PASTE_END, i)
                if end == -1:
                    self.paste_buffer.append(text[i:])
                    break
                self.paste_buffer.append(text[i:end])
                events.append(PasteEvent(text="".join(self.paste_buffer).replace("\r\n", "\n").replace("\r", "\n")))
                self.pasting = False
                self.paste_buffer = []
                i = end + len(PASTE_END)
                continue
            if text.startswith(PASTE_START, i):
                self.pasting = True
                i += len(PASTE_START)
                continue
            event, i = self._parse_one(text, i)
            if event is not None:
                events.append(event)
        return events

    def _parse_one(self, text: str, i: int) -> tuple[KeyEvent | None, int]:
        ch = text[i]
        if ch != ESC:
            return self._parse_character(ch), i + 1
        if i + 1 == len(text):
            return KeyEvent.named(KeyCode.ESC), i + 1
        follower = text[i + 1]
        if follower == "[":
            return self._parse_csi(text, i + 2)
        if follower == "O" and i + 2 < len(text):
            return self._parse_ss3(text[i + 2]), i + 3
        if follower == ESC:
            return KeyEvent.named(KeyCode.ESC), i + 1
        return _with_alt(self._parse_character(follower)), i + 2

    def _parse_character(self, ch: str) -> KeyEvent:
        if ch in CONTROL_CHARACTERS:
            return KeyEvent.named(CONTROL_CHARACTERS[ch])
        if ch == "\x00":
            return KeyEvent.char(" ", ctrl=True)
        code = ord(ch)
        if 0x01 <= code <= 0x1A:
            return KeyEvent.char(chr(ord("a") + code - 1), ctrl=True)
        if 0x1C <= code <= 0x1F:
            return KeyEvent.char(chr(ord("4") + code - 0x1C), ctrl=True)
        if ch.isupper():
            return KeyEvent.char(ch, shift=True)
        return KeyEvent.char(ch)

    def _parse_ss3(self, final: str) -> KeyEvent | None:
        if final in CSI_FUNCTION_LETTERS:
            return KeyEvent(key=KeyCode.FUNCTION, function=CSI_FUNCTION_LETTERS[final])
        if final in CSI_LETTERS:
            return KeyEvent.named(CSI_LETTERS[final])
        logger.debug("Ignoring unknown SS3 sequence %r", final)
        return None

    def _parse_csi(self, text: str, start: int) -> tuple[KeyEvent | None, int]:
        end = start
        while end < len(text) and not ("\x40" <= text[end] <= "\x7e"):
            end += 1
        if end == len(text):
            logger.debug("Truncated CSI sequence %r", text[start:])
            return None, end
        params = text[start:end].split(";")
        final = text[end]
        annotation = _modifiers_from_param(params[1]) if len(params) > 1 else ModifierAnnotation()
        event = None
        if final in CSI_LETTERS:
            event = KeyEvent(key=CSI_LETTERS[final], annotation=annotation)
            if final == "Z":
                event = KeyEvent(key=KeyCode.BACKTAB)
        elif final in CSI_FUNCTION_LETTERS:
            event = KeyEvent(key=KeyCode.FUNCTION, function=CSI_FUNCTION_LETTERS[final], annotation=annotation)
        elif final == "~" and params[0].isdigit():
            number = int(params[0])
            if number in CSI_TILDES:
                event = KeyEvent(key=CSI_TILDES[number], annotation=annotation)
            elif number in CSI_TILDE_FUNCTIONS:
                event = KeyEvent(key=KeyCode.FUNCTION, function=CSI_TILDE_FUNCTIONS[number], annotation=annotation)
        if event is None:
            logger.debug("Ignoring unknown CSI sequence %r", text[start : end + 1])
        return event, end + 1


class Section(abc.ABC):
    @abc.abstractmethod
    async def pump(self, source: trio.MemoryReceiveChannel[Any], sink: trio.MemorySendChannel[Any]): ...


# stage 1: bytes from the tty into text, holding back partial UTF-8 sequences
class DecodeText(Section):
    def __init__(self):
        self.decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    async def pump(self, source: trio.MemoryReceiveChannel[bytes], sink: trio.MemorySendChannel[str]):
        async with aclosing(source), aclosing(sink):
            async for chunk in source:
                text = self.decoder.decode(chunk)
                if text:
                    await sink.send(text)


# stage 2: text into key, paste and control events
class ParseKeys(Section):
    def __init__(self):
        self.parser = KeyParser()

    async def pump(self, source: trio.MemoryReceiveChannel[str], sink: trio.MemorySendChannel[TerminalEvent]):
        async with aclosing(source), aclosing(sink):
            async for text in source:
                for event in self.parser.feed(text):
                    await sink.send(event)


@asynccontextmanager
async def pump_all(first_source: AsyncIterable[Any], *sections: Section):
    async with trio.open_nursery() as nursery:
        section_input = first_source
        for section in sections:
            section_send_channel, section_receive_channel = trio.open_memory_channel(0)
            nursery.start_soon(section.pump, section_input, section_send_channel)
            section_input = section_receive_channel
        yield section_input
        nursery.cancel_scope.cancel()


@asynccontextmanager
async def make_keystream(byte_channel: trio.MemoryReceiveChannel[bytes]):
    async with pump_all(byte_channel, DecodeText(), ParseKeys()) as keystream:
        yield cast(trio.MemoryReceiveChannel[TerminalEvent], keystream)
