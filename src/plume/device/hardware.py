from __future__ import annotations

import abc
import logging
import os
import shutil
import signal
import sys
import termios
import tty
import typing

import trio

from ..commontypes import Size
from .hwtypes import HardwareError, ResizeEvent, TerminalEvent
from .keystreams import make_keystream

logger = logging.getLogger(__name__)

CSI = "\x1b["
READ_RETRY_DELAY = 0.05


class Hardware(metaclass=abc.ABCMeta):
    """The terminal: a live source of input events, and somewhere to draw.

    Input arrives on event_receive_channel. poll() and read() give the event multiplexer a poll-then-read
    view of it, holding at most one event that poll() has already taken off the channel.
    """

    event_channel: trio.MemorySendChannel[TerminalEvent]
    event_receive_channel: trio.MemoryReceiveChannel[TerminalEvent]

    def __init__(self):
        self.event_channel, self.event_receive_channel = trio.open_memory_channel[TerminalEvent](0)
        self._peeked: typing.Optional[TerminalEvent] = None
        self._last_size: typing.Optional[Size] = None

    async def poll(self, timeout: float) -> bool:
        if self._peeked is not None:
            return True
        with trio.move_on_after(timeout):
            try:
                self._peeked = await self.event_receive_channel.receive()
            except (trio.EndOfChannel, trio.ClosedResourceError):
                # let read() report the failure
                return True
        return self._peeked is not None

    async def read(self) -> typing.Optional[TerminalEvent]:
        if self._peeked is None:
            try:
                return await self.event_receive_channel.receive()
            except (trio.EndOfChannel, trio.ClosedResourceError):
                logger.debug("Live input is unavailable", exc_info=True)
                await trio.sleep(READ_RETRY_DELAY)
                return None
        event, self._peeked = self._peeked, None
        return event

    def take_resize(self) -> bool:
        """True once for every change in terminal size since the last call."""
        size = self.size()
        changed = self._last_size is not None and size != self._last_size
        self._last_size = size
        return changed

    @abc.abstractmethod
    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED): ...

    @abc.abstractmethod
    def start(self): ...

    @abc.abstractmethod
    def end(self): ...

    @abc.abstractmethod
    def size(self) -> Size: ...

    @abc.abstractmethod
    def write(self, text: str): ...

    @abc.abstractmethod
    def flush(self): ...

    def goto(self, x: int, y: int):
        self.write(f"{CSI}{y + 1};{x + 1}H")

    def hide_cursor(self):
        self.write(f"{CSI}?25l")

    def show_cursor(self):
        self.write(f"{CSI}?25h")

    def clear_line(self):
        self.write(f"{CSI}2K")


class TerminalHardware(Hardware):
    def __init__(self, fd: typing.Optional[int] = None):
        super().__init__()
        self.fd = sys.stdin.fileno() if fd is None else fd
        self.out = sys.stdout
        self._saved_mode = None
        self._pending: list[str] = []

    def start(self):
        try:
            self._saved_mode = termios.tcgetattr(self.fd)
            tty.setraw(self.fd)
        except termios.error as exc:
            raise HardwareError(f"Unable to enter raw mode: {exc}") from exc
        # alternate screen, bracketed paste
        self.write(f"{CSI}?1049h{CSI}?2004h")
        self.flush()

    def end(self):
        self.write(f"{CSI}?2004l{CSI}?1049l")
        self.show_cursor()
        self.flush()
        if self._saved_mode is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_mode)
            self._saved_mode = None

    def size(self) -> Size:
        columns, lines = shutil.get_terminal_size()
        return Size(width=columns, height=lines)

    def write(self, text: str):
        self._pending.append(text)

    def flush(self):
        self.out.write("".join(self._pending))
        self.out.flush()
        self._pending = []

    async def _read_tty(self, byte_send_channel: trio.MemorySendChannel[bytes], *, task_status=trio.TASK_STATUS_IGNORED):
        async with byte_send_channel, trio.lowlevel.FdStream(os.dup(self.fd)) as stream:
            task_status.started()
            while chunk := await stream.receive_some():
                await byte_send_channel.send(chunk)
        logger.debug("Terminal input closed")

    async def _handle_keystream(self, byte_receive_channel: trio.MemoryReceiveChannel[bytes], *, task_status=trio.TASK_STATUS_IGNORED):
        task_status.started()
        async with make_keystream(byte_receive_channel) as keystream:
            async for event in keystream:
                await self.event_channel.send(event)

    async def _handle_resizes(self, *, task_status=trio.TASK_STATUS_IGNORED):
        with trio.open_signal_receiver(signal.SIGWINCH) as signals:
            task_status.started()
            async for _ in signals:
                await self.event_channel.send(ResizeEvent(size=self.size()))

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        byte_send_channel, byte_receive_channel = trio.open_memory_channel[bytes](0)
        async with trio.open_nursery() as nursery:
            await nursery.start(self._handle_keystream, byte_receive_channel)
            await nursery.start(self._handle_resizes)
            await nursery.start(self._read_tty, byte_send_channel)
            task_status.started()


class EventTestHardware(Hardware):
    """Hardware for tests: events come from a memory channel, output is kept in memory."""

    def __init__(self, raw_receive_channel: trio.MemoryReceiveChannel[TerminalEvent], size: Size = Size(width=80, height=24)):
        super().__init__()
        self.event_receive_channel = raw_receive_channel
        self.screen_size = size
        self.written: list[str] = []
        self.flushed: list[str] = []
        self.started = False
        self.polls = 0
        self.reads = 0

    async def poll(self, timeout: float) -> bool:
        self.polls += 1
        return await super().poll(timeout)

    async def read(self) -> typing.Optional[TerminalEvent]:
        self.reads += 1
        return await super().read()

    def start(self):
        self.started = True

    def end(self):
        self.started = False

    def size(self) -> Size:
        return self.screen_size

    def write(self, text: str):
        self.written.append(text)

    def flush(self):
        self.flushed.append("".join(self.written))
        self.written = []

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        task_status.started()
