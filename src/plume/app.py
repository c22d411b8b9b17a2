# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import argparse
import contextlib
import datetime
import logging
import os
import pathlib
import sys
from typing import Optional, TextIO

import trio
import trio_util

from .commontypes import DocumentError, FatalError, Loc
from .device.hardware import Hardware, TerminalHardware
from .device.hwtypes import HardwareError, KeyCode, KeyEvent, PasteEvent, ResizeEvent, TerminalEvent
from .editor.dispatch import dispatch_event
from .editor.document import Document, FileContainer
from .editor.events import EventMultiplexer
from .editor.feedback import Feedback
from .editor.macros import MacroManager
from .editor.tasks import TaskScheduler
from .rendering.screen import Renderer
from .scripting.errors import handle_script_result
from .scripting.host import ScriptHost
from .settings import DEFAULT_SETTINGS_PATH, Settings

logger = logging.getLogger(__name__)


class Editor:
    hardware: Hardware
    files: list[FileContainer]
    active: trio_util.AsyncBool

    def __init__(self, hardware: Hardware, settings: Settings):
        self.hardware = hardware
        self.settings = settings
        self.files = []
        self.ptr = 0
        self.feedback = Feedback.none()
        self.macro_man = MacroManager()
        self.task_manager = TaskScheduler()
        self.plugin_active = False
        self.command: Optional[str] = None
        self.current_event: Optional[TerminalEvent] = None
        self.clipboard = ""
        self.needs_rerender = True
        self.active = trio_util.AsyncBool(True)
        self.renderer = Renderer(hardware, settings)
        self.events = EventMultiplexer(self)
        self.host = ScriptHost(self)

    @property
    def file(self) -> FileContainer:
        return self.files[self.ptr]

    @property
    def doc(self) -> Document:
        return self.files[self.ptr].doc

    # documents

    def _add(self, doc: Document, file_type: str):
        self.files.append(FileContainer(doc, file_type))
        self.ptr = len(self.files) - 1
        self.needs_rerender = True

    def new_document(self):
        self._add(Document(), "Unknown")

    def open_document(self, path: str, read_only: bool = False, file_type: Optional[str] = None):
        doc = Document.open(pathlib.Path(path).expanduser())
        doc.read_only = read_only
        if file_type is None:
            file_type = self.settings.file_type_for(pathlib.Path(path).suffix.removeprefix("."))
        self._add(doc, file_type)

    def open_text(self, text: str, read_only: bool = False, file_type: Optional[str] = None):
        """A new unnamed document holding text, such as whatever was piped in on stdin."""
        doc = Document()
        doc.insert(Loc.zeroes(), text)
        doc.read_only = read_only
        self._add(doc, file_type or "Unknown")

    def new_if_empty(self):
        if not self.files:
            self.new_document()

    async def close_document(self):
        if self.doc.modified:
            answer = await self.prompt("This document has unsaved changes; close anyway? (y/n)")
            if answer is None or answer.strip().lower() not in ("y", "yes"):
                return
        del self.files[self.ptr]
        if not self.files:
            self.active.value = False
            self.ptr = 0
            return
        self.ptr = min(self.ptr, len(self.files) - 1)
        self.needs_rerender = True

    def set_file_type(self, file_type: str):
        self.files[self.ptr] = FileContainer(self.doc, file_type)
        self.needs_rerender = True

    # editing; per-character highlighter work is skipped while a script is editing

    @contextlib.contextmanager
    def programmatic_edit(self):
        outer = self.plugin_active
        self.plugin_active = True
        try:
            yield
        finally:
            self.plugin_active = outer
            if not outer:
                self.update_highlighter()

    def hl_edit(self, y: int):
        self.file.highlighter.edit(y)
        if not self.plugin_active:
            self.update_highlighter()

    def hl_edit_all(self):
        self.file.highlighter.invalidate_all(self.doc.len_lines())
        if not self.plugin_active:
            self.update_highlighter()

    def update_highlighter(self):
        # the last document may have just been closed
        if self.files:
            self.file.highlighter.refresh(self.doc.lines)

    def character(self, ch: str):
        if ch == "\n":
            self.doc.enter()
            self.hl_edit_all()
            return
        self.doc.insert_char(ch)
        self.hl_edit(self.doc.cursor.y)

    def backspace(self):
        lines = self.doc.len_lines()
        self.doc.backspace()
        self._edited(lines)

    def delete(self):
        lines = self.doc.len_lines()
        self.doc.delete()
        self._edited(lines)

    def delete_line(self):
        self.doc.delete_line()
        self.hl_edit_all()

    def delete_word(self):
        lines = self.doc.len_lines()
        self.doc.delete_word()
        self._edited(lines)

    def _edited(self, previous_line_count: int):
        if self.doc.len_lines() != previous_line_count:
            self.hl_edit_all()
        else:
            self.hl_edit(self.doc.cursor.y)

    async def handle_event(self, event: TerminalEvent):
        match event:
            case ResizeEvent():
                self.needs_rerender = True
                self.render()
            case PasteEvent(text=text):
                with self.programmatic_edit():
                    for ch in text:
                        self.character(ch)
            case KeyEvent(key=KeyCode.CHAR, character=ch, annotation=modifiers) if not (modifiers.ctrl or modifiers.alt):
                self.character(ch)
            case KeyEvent(key=KeyCode.ENTER, annotation=modifiers) if modifiers.is_plain:
                self.character("\n")
            case KeyEvent(key=KeyCode.TAB, annotation=modifiers) if modifiers.is_plain:
                self.character("\t")
            case KeyEvent(key=KeyCode.BACKSPACE, annotation=modifiers) if modifiers.is_plain:
                self.backspace()
            case KeyEvent(key=KeyCode.DELETE, annotation=modifiers) if modifiers.is_plain:
                self.delete()

    async def prompt(self, question: str) -> Optional[str]:
        """Ask on the feedback line. None if the user backs out with escape or ctrl-c."""
        answer = ""
        while True:
            self.renderer.render_prompt(question, answer)
            event = await self.events.acquire_scheduled_event()
            match event:
                case KeyEvent(key=KeyCode.ENTER):
                    return answer
                case KeyEvent(key=KeyCode.ESC):
                    return None
                case KeyEvent(key=KeyCode.CHAR, character="c", annotation=modifiers) if modifiers.ctrl:
                    return None
                case KeyEvent(key=KeyCode.BACKSPACE):
                    answer = answer[:-1]
                case KeyEvent(key=KeyCode.CHAR, character=ch, annotation=modifiers) if not (modifiers.ctrl or modifiers.alt):
                    answer += ch
                case PasteEvent(text=text):
                    answer += text.replace("\n", " ")
                case ResizeEvent():
                    self.needs_rerender = True
                    self.render()

    # drawing

    def render(self):
        if self.needs_rerender:
            self.renderer.render(self)
        else:
            self.render_status_line()
            self.render_feedback_line()

    def render_status_line(self):
        self.renderer.render_status_line(self)

    def render_feedback_line(self):
        self.renderer.render_feedback_line(self)

    # scripting

    def schedule_task(self, name: str, interval: datetime.timedelta):
        self.task_manager.schedule(name, interval, trio.current_time())

    async def load_scripts(self):
        await self.host.bootstrap()
        config_path = self.settings.config_path.expanduser()
        if config_path.exists():
            result = await self.host.load_file(config_path)
        else:
            logger.info("No config at %s; using the default", config_path)
            result = await self.host.load_default_config()
        handle_script_result(self, "", result)
        await self.load_plugins()

    async def load_plugins(self):
        for name in self.host.namespace.get("plugins", []):
            for directory in self.settings.plugin_paths:
                candidate = directory.expanduser() / f"{name}.py"
                if candidate.exists():
                    handle_script_result(self, "", await self.host.load_file(candidate))
                    break
            else:
                self.feedback = Feedback.warning(f"Plugin {name} was not found")

    # main loop

    async def tick(self):
        self.render()
        event = await self.events.acquire_event()
        self.current_event = event
        self.feedback = Feedback.none()
        await dispatch_event(self, event)
        self.needs_rerender = True

    async def run(self, *, task_status=trio.TASK_STATUS_IGNORED):
        async with trio.open_nursery() as nursery:
            await nursery.start(self.hardware.run)
            self.new_if_empty()
            await self.load_scripts()
            self.hardware.start()
            try:
                task_status.started()
                while self.active.value:
                    await self.tick()
            finally:
                self.hardware.end()
                nursery.cancel_scope.cancel()
        logger.debug("goodbye")


def open_requested(editor: Editor, parsed: argparse.Namespace, stdin: TextIO = sys.stdin):
    for path in parsed.files:
        try:
            editor.open_document(path, read_only=parsed.readonly, file_type=parsed.filetype)
        except DocumentError as exc:
            raise FatalError(str(exc)) from exc
    if parsed.stdin:
        editor.open_text(stdin.read(), read_only=parsed.readonly, file_type=parsed.filetype)


async def start_plume(parsed: argparse.Namespace):
    settings = Settings.load(parsed.settings)
    if parsed.config is not None:
        settings.config_path = parsed.config
    if parsed.stdin:
        # stdin is the pipe, so keys come from the controlling terminal
        try:
            hardware = TerminalHardware(fd=os.open("/dev/tty", os.O_RDONLY))
        except OSError as exc:
            raise FatalError(f"Unable to open the terminal: {exc}") from exc
    else:
        hardware = TerminalHardware()
    editor = Editor(hardware, settings)
    open_requested(editor, parsed)
    await editor.run()


parser = argparse.ArgumentParser(prog="plume")
parser.add_argument("files", nargs="*", help="files to open")
parser.add_argument("--settings", type=pathlib.Path, default=DEFAULT_SETTINGS_PATH)
parser.add_argument("--config", type=pathlib.Path, help="script to run instead of the configured one")
parser.add_argument("--readonly", action="store_true", help="open files read only")
parser.add_argument("--filetype", help="file type for the opened files")
parser.add_argument("--stdin", action="store_true", help="also open whatever is piped in on stdin")
parser.add_argument("--log", type=pathlib.Path, help="write a debug log here")


def main(argv=sys.argv):
    parsed = parser.parse_args(argv[1:])
    if parsed.log is not None:
        logging.basicConfig(filename=parsed.log, level=logging.DEBUG)
    else:
        # the terminal belongs to the editor
        logging.getLogger().addHandler(logging.NullHandler())
    status = 0
    try:
        trio.run(start_plume, parsed)
    except* (FatalError, HardwareError) as group:
        for exc in group.exceptions:
            print(f"plume: {exc}", file=sys.stderr)
        status = 1
    return status
