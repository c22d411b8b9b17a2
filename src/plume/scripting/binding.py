# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import contextlib
import logging
import os
import pathlib
import typing

from .. import __version__
from ..commontypes import DocumentError, FatalError, Loc
from ..durations import as_timedelta
from ..editor.feedback import Feedback

if typing.TYPE_CHECKING:
    from ..app import Editor

logger = logging.getLogger(__name__)


class EditorBinding:
    """The editor as scripts see it, published to them as the global `editor`.

    Rows are 1-based on this side of the boundary and 0-based inside the editor; columns are 0-based
    everywhere. Every method taking a row converts it on the way in, and every property reporting one
    converts it on the way out.
    """

    def __init__(self, editor: Editor):
        self._editor = editor

    @property
    def _doc(self):
        return self._editor.doc

    def _loc(self, loc: Loc):
        return self._editor.host.table(x=loc.x, y=loc.y + 1)

    @contextlib.contextmanager
    def _cursor_kept(self):
        saved = self._doc.char_loc()
        try:
            yield
        finally:
            self._doc.move_to(saved)

    @contextlib.contextmanager
    def _reported(self):
        # a rejected edit becomes feedback and the script carries on
        try:
            yield
        except DocumentError as exc:
            self._editor.feedback = Feedback.error(str(exc))

    # properties

    @property
    def cursor(self):
        return self._loc(self._doc.char_loc())

    @property
    def selection(self):
        return self._loc(self._doc.selection_end)

    @property
    def document_name(self):
        return self._editor.file.name

    @property
    def document_length(self):
        return self._doc.len_lines()

    @property
    def version(self):
        return __version__

    @property
    def current_document_id(self):
        return self._editor.ptr

    @property
    def document_count(self):
        return len(self._editor.files)

    @property
    def document_type(self):
        return self._editor.file.file_type

    @property
    def file_name(self):
        if self._doc.file_name is None:
            return None
        return pathlib.Path(self._doc.file_name).name

    @property
    def file_extension(self):
        if self._doc.file_name is None:
            return None
        return pathlib.Path(self._doc.file_name).suffix.removeprefix(".")

    @property
    def file_path(self):
        if self._doc.file_name is None:
            return None
        return str(pathlib.Path(self._doc.file_name).absolute())

    @property
    def cwd(self):
        return os.getcwd()

    @property
    def macro_recording(self):
        return self._editor.macro_man.recording

    @property
    def macro_playing(self):
        return self._editor.macro_man.playing

    # process and configuration

    def panic(self, message: str):
        raise FatalError(message)

    def reset_terminal(self):
        self._editor.hardware.end()
        self._editor.hardware.start()
        self.rerender()

    async def reload_config(self):
        await self._editor.load_scripts()

    async def reload_plugins(self):
        await self._editor.load_plugins()

    # feedback and prompting

    def display_error(self, message: str):
        self._editor.feedback = Feedback.error(message)

    def display_warning(self, message: str):
        self._editor.feedback = Feedback.warning(message)

    def display_info(self, message: str):
        self._editor.feedback = Feedback.info(message)

    async def prompt(self, question: str) -> typing.Optional[str]:
        return await self._editor.prompt(question)

    # editing at the cursor

    def insert(self, text: str):
        with self._editor.programmatic_edit(), self._reported():
            for ch in text:
                self._editor.character(ch)

    def remove(self):
        with self._editor.programmatic_edit(), self._reported():
            self._editor.backspace()

    def insert_line(self):
        with self._editor.programmatic_edit(), self._reported():
            self._editor.character("\n")

    def remove_line(self):
        with self._editor.programmatic_edit(), self._reported():
            self._editor.delete_line()

    def remove_word(self):
        with self._editor.programmatic_edit(), self._reported():
            self._editor.delete_word()

    # editing elsewhere; the cursor stays put

    def insert_at(self, text: str, x: int, y: int):
        with self._editor.programmatic_edit(), self._cursor_kept(), self._reported():
            self._doc.move_to(Loc(x=x, y=y - 1))
            for ch in text:
                self._editor.character(ch)

    def remove_at(self, x: int, y: int):
        with self._editor.programmatic_edit(), self._cursor_kept(), self._reported():
            self._doc.move_to(Loc(x=x, y=y - 1))
            self._editor.delete()

    def insert_line_at(self, text: str, y: int):
        with self._editor.programmatic_edit(), self._cursor_kept(), self._reported():
            if y - 1 < self._doc.len_lines():
                self._doc.move_to(Loc(x=0, y=y - 1))
                for ch in text + "\n":
                    self._editor.character(ch)
            else:
                self._doc.move_bottom()
                for ch in "\n" + text:
                    self._editor.character(ch)

    def remove_line_at(self, y: int):
        with self._editor.programmatic_edit(), self._cursor_kept(), self._reported():
            self._doc.move_to(Loc(x=0, y=y - 1))
            self._editor.delete_line()

    # reading

    def get(self):
        return self._doc.contents()

    def get_character(self):
        loc = self._doc.char_loc()
        return self.get_character_at(loc.x, loc.y + 1)

    def get_character_at(self, x: int, y: int):
        line = self._doc.line(y - 1)
        if line is None or not 0 <= x < len(line):
            return ""
        return line[x]

    def get_line(self):
        return self._doc.line(self._doc.char_loc().y)

    def get_line_at(self, y: int):
        return self._doc.line(y - 1)

    # cursor motion

    def move_to(self, x: int, y: int):
        self._doc.move_to(Loc(x=x, y=y - 1))

    def move_up(self):
        self._doc.move_up()

    def move_down(self):
        self._doc.move_down()

    def move_left(self):
        self._doc.move_left()

    def move_right(self):
        self._doc.move_right()

    def move_home(self):
        self._doc.move_home()

    def move_end(self):
        self._doc.move_end()

    def move_page_up(self):
        self._doc.move_page_up()

    def move_page_down(self):
        self._doc.move_page_down()

    def move_top(self):
        self._doc.move_top()

    def move_bottom(self):
        self._doc.move_bottom()

    def move_previous_word(self):
        self._doc.move_previous_word()

    def move_next_word(self):
        self._doc.move_next_word()

    def cursor_snap(self):
        self._doc.old_x = self._doc.char_loc().x

    def cursor_to_viewport(self):
        doc = self._doc
        last_visible = doc.offset + max(1, doc.size.height) - 1
        y = min(max(doc.cursor.y, doc.offset), last_visible)
        if y != doc.cursor.y:
            doc.move_to_y(y)

    def move_line_up(self):
        self._doc.swap_line_up()
        self._editor.hl_edit_all()

    def move_line_down(self):
        self._doc.swap_line_down()
        self._editor.hl_edit_all()

    # selection

    def select_up(self):
        self._doc.move_up(extend=True)

    def select_down(self):
        self._doc.move_down(extend=True)

    def select_left(self):
        self._doc.move_left(extend=True)

    def select_right(self):
        self._doc.move_right(extend=True)

    def select_all(self):
        self._doc.select_all()

    def select_to(self, x: int, y: int):
        self._doc.select_to(Loc(x=x, y=y - 1))

    def cancel_selection(self):
        self._doc.cancel_selection()

    # clipboard

    def cut(self):
        doc = self._doc
        self.display_info("Text cut to clipboard")
        if doc.has_selection:
            self._editor.clipboard = doc.selection_text()
            with self._editor.programmatic_edit(), self._reported():
                self._editor.backspace()
        else:
            self._editor.clipboard = doc.line(doc.cursor.y) + "\n"
            self.remove_line()

    def copy(self):
        doc = self._doc
        if doc.has_selection:
            self._editor.clipboard = doc.selection_text()
        else:
            self._editor.clipboard = doc.line(doc.cursor.y) + "\n"
        self.display_info("Text copied to clipboard")

    def paste(self):
        self.insert(self._editor.clipboard)

    # documents

    def previous_tab(self):
        self._editor.ptr = (self._editor.ptr - 1) % len(self._editor.files)
        self._editor.needs_rerender = True

    def next_tab(self):
        self._editor.ptr = (self._editor.ptr + 1) % len(self._editor.files)
        self._editor.needs_rerender = True

    def move_to_document(self, document_id: int):
        if not 0 <= document_id < len(self._editor.files):
            raise DocumentError(f"There is no document {document_id}")
        self._editor.ptr = document_id
        self._editor.needs_rerender = True

    def new(self):
        self._editor.new_document()

    async def open(self, path: typing.Optional[str] = None):
        if path is None:
            path = await self.prompt("File to open")
            if path is None:
                return
        self._editor.open_document(path)

    async def save(self):
        if self._doc.file_name is None:
            await self.save_as()
            return
        self._doc.save()
        self.display_info(f"Saved {self.file_name}")

    async def save_as(self, path: typing.Optional[str] = None):
        if path is None:
            path = await self.prompt("Save as")
            if not path:
                return
        self._doc.save_as(path)
        self._editor.set_file_type(self._editor.settings.file_type_for(self.file_extension or ""))
        self.display_info(f"Saved {self.file_name}")

    def save_all(self):
        saved = 0
        for container in self._editor.files:
            if container.doc.file_name is not None:
                container.doc.save()
                saved += 1
        self.display_info(f"Saved {saved} documents")

    async def quit(self):
        await self._editor.close_document()

    # history

    def undo(self):
        self._doc.undo()
        self._editor.hl_edit_all()

    def redo(self):
        self._doc.redo()
        self._editor.hl_edit_all()

    def commit(self):
        self._doc.commit()

    # searching

    async def search(self):
        query = await self.prompt("Search")
        if not query:
            return
        if not self.move_next_match(query):
            self.display_warning(f"No matches for {query}")

    async def replace(self):
        target = await self.prompt("Replace")
        if not target:
            return
        replacement = await self.prompt("With")
        if replacement is None:
            return
        self.replace_all(target, replacement)

    def replace_all(self, target: str, replacement: str):
        count = self._doc.replace_all(target, replacement)
        self._editor.hl_edit_all()
        self.display_info(f"Replaced {count} occurrences")
        return count

    def move_next_match(self, query: str):
        doc = self._doc
        found = doc.find_next(query, Loc(x=doc.cursor.x + 1, y=doc.cursor.y))
        if found is None:
            found = doc.find_next(query, Loc.zeroes())
        if found is not None:
            doc.move_to(found)
        return found is not None

    def move_previous_match(self, query: str):
        doc = self._doc
        found = doc.find_previous(query, doc.cursor)
        if found is None:
            found = doc.find_previous(query, Loc(x=len(doc.lines[-1]), y=doc.len_lines() - 1))
        if found is not None:
            doc.move_to(found)
        return found is not None

    # document settings

    def set_read_only(self, read_only: bool):
        self._doc.read_only = read_only

    def set_file_type(self, file_type: str):
        if file_type not in self._editor.settings.file_types:
            self.display_error(f"Invalid file type: {file_type}")
            return
        self._editor.set_file_type(file_type)

    # drawing

    def rerender(self):
        self._editor.needs_rerender = True
        self._editor.render()

    def rerender_status_line(self):
        self._editor.render_status_line()

    def rerender_feedback_line(self):
        self._editor.render_feedback_line()

    async def open_command_line(self):
        command = await self.prompt("Command")
        if command is not None:
            self._editor.command = command

    # macros

    def macro_record_start(self):
        self._editor.macro_man.record()

    def macro_record_stop(self):
        macros = self._editor.macro_man
        if self._editor.current_event is not None:
            macros.discard(self._editor.current_event)
        macros.finish()

    def macro_play(self, times: int = 1):
        macros = self._editor.macro_man
        if self._editor.current_event is not None:
            macros.discard(self._editor.current_event)
        macros.finish()
        macros.play(times)

    # scheduled tasks

    def schedule(self, name: str, interval):
        self._editor.schedule_task(name, as_timedelta(interval))

    def unschedule(self, name: str):
        return self._editor.task_manager.cancel(name)
