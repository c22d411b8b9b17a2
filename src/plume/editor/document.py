# SPDX-FileCopyrightText: 2023 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import pathlib
import typing
import unicodedata

import msgspec

from ..commontypes import DocumentError, Loc, Size
from .highlight import Highlighter

logger = logging.getLogger(__name__)


# Columns are character indices into the line; wide characters and tabs are the renderer's problem.
# A selection runs between the cursor and selection_end. When nothing is selected they are equal.


class Snapshot(msgspec.Struct, frozen=True):
    lines: tuple[str, ...]
    cursor: Loc


class Document:
    def __init__(self, lines: typing.Optional[list[str]] = None, file_name: typing.Optional[str] = None):
        self.lines: list[str] = lines if lines else [""]
        self.file_name = file_name
        self.cursor = Loc.zeroes()
        self.selection_end = Loc.zeroes()
        self.old_x = 0
        self.offset = 0
        self.size = Size(width=80, height=24)
        self.read_only = False
        self.modified = False
        self.undo_stack: list[Snapshot] = []
        self.redo_stack: list[Snapshot] = []
        self._committed = self._snapshot()

    @classmethod
    def open(cls, path: typing.Union[str, pathlib.Path]):
        path = pathlib.Path(path)
        if not path.exists():
            logger.debug("%s does not exist yet; starting empty", path)
            return cls(file_name=str(path))
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentError(f"Unable to open {path}: {exc}") from exc
        return cls(lines=text.split("\n"), file_name=str(path))

    def save(self):
        if self.file_name is None:
            raise DocumentError("This document has no file name")
        self.save_as(self.file_name)

    def save_as(self, file_name: str):
        try:
            pathlib.Path(file_name).write_text("\n".join(self.lines), encoding="utf-8")
        except OSError as exc:
            raise DocumentError(f"Unable to save {file_name}: {exc}") from exc
        self.file_name = file_name
        self.modified = False
        logger.debug("Saved %s", file_name)

    def len_lines(self):
        return len(self.lines)

    def line(self, y: int) -> typing.Optional[str]:
        if 0 <= y < len(self.lines):
            return self.lines[y]
        return None

    def char_loc(self) -> Loc:
        return self.cursor

    def contents(self):
        return "\n".join(self.lines)

    # undo and redo work on whole-document snapshots taken at commit points

    def _snapshot(self):
        return Snapshot(lines=tuple(self.lines), cursor=self.cursor)

    def _restore(self, snapshot: Snapshot):
        self.lines = list(snapshot.lines)
        self._committed = snapshot
        self._place(snapshot.cursor)
        self.modified = True

    def commit(self):
        current = self._snapshot()
        if current.lines == self._committed.lines:
            return
        self.undo_stack.append(self._committed)
        self.redo_stack.clear()
        self._committed = current

    def undo(self):
        self._check_writable()
        self.commit()
        if not self.undo_stack:
            raise DocumentError("Nothing to undo")
        self.redo_stack.append(self._committed)
        self._restore(self.undo_stack.pop())

    def redo(self):
        self._check_writable()
        if not self.redo_stack:
            raise DocumentError("Nothing to redo")
        self.undo_stack.append(self._committed)
        self._restore(self.redo_stack.pop())

    # editing primitives

    def _check_writable(self):
        if self.read_only:
            raise DocumentError("This document is read only")

    def insert(self, loc: Loc, text: str):
        self._check_writable()
        loc = self.clamp(loc)
        line = self.lines[loc.y]
        before, after = line[: loc.x], line[loc.x :]
        pieces = text.split("\n")
        if len(pieces) == 1:
            self.lines[loc.y] = before + text + after
            end = Loc(x=loc.x + len(text), y=loc.y)
        else:
            new_lines = [before + pieces[0], *pieces[1:-1], pieces[-1] + after]
            self.lines[loc.y : loc.y + 1] = new_lines
            end = Loc(x=len(pieces[-1]), y=loc.y + len(pieces) - 1)
        self.modified = True
        return end

    def delete_range(self, start: Loc, end: Loc) -> str:
        self._check_writable()
        start, end = sorted((self.clamp(start), self.clamp(end)))
        removed = self.text_between(start, end)
        self.lines[start.y : end.y + 1] = [self.lines[start.y][: start.x] + self.lines[end.y][end.x :]]
        self.modified = True
        return removed

    def text_between(self, start: Loc, end: Loc) -> str:
        if start.y == end.y:
            return self.lines[start.y][start.x : end.x]
        parts = [self.lines[start.y][start.x :], *self.lines[start.y + 1 : end.y], self.lines[end.y][: end.x]]
        return "\n".join(parts)

    def insert_char(self, ch: str):
        self.remove_selection()
        end = self.insert(self.cursor, ch)
        self._place(end)
        if self.whitespace_char(ch):
            self.commit()

    def backspace(self):
        if self.remove_selection():
            return
        if self.cursor.x > 0:
            start = Loc(x=self.cursor.x - 1, y=self.cursor.y)
        elif self.cursor.y > 0:
            start = Loc(x=len(self.lines[self.cursor.y - 1]), y=self.cursor.y - 1)
        else:
            return
        self.delete_range(start, self.cursor)
        self._place(start)

    def delete(self):
        if self.remove_selection():
            return
        if self.cursor.x < len(self.lines[self.cursor.y]):
            end = Loc(x=self.cursor.x + 1, y=self.cursor.y)
        elif self.cursor.y + 1 < len(self.lines):
            end = Loc(x=0, y=self.cursor.y + 1)
        else:
            return
        self.delete_range(self.cursor, end)

    def enter(self):
        self.remove_selection()
        end = self.insert(self.cursor, "\n")
        self._place(end)
        self.commit()

    def delete_line(self):
        self._check_writable()
        if len(self.lines) == 1:
            self.lines[0] = ""
        else:
            del self.lines[self.cursor.y]
        self.modified = True
        self._place(self.cursor)
        self.commit()

    def delete_word(self):
        start = self._previous_word_start(self.cursor)
        if start == self.cursor:
            self.backspace()
            return
        self.delete_range(start, self.cursor)
        self._place(start)

    def swap_line_up(self):
        y = self.cursor.y
        if y == 0:
            return
        self._check_writable()
        self.lines[y - 1], self.lines[y] = self.lines[y], self.lines[y - 1]
        self.modified = True
        self._place(Loc(x=self.cursor.x, y=y - 1))

    def swap_line_down(self):
        y = self.cursor.y
        if y + 1 >= len(self.lines):
            return
        self._check_writable()
        self.lines[y + 1], self.lines[y] = self.lines[y], self.lines[y + 1]
        self.modified = True
        self._place(Loc(x=self.cursor.x, y=y + 1))

    # selection

    @property
    def has_selection(self):
        return self.cursor != self.selection_end

    def selection_range(self) -> tuple[Loc, Loc]:
        return tuple(sorted((self.cursor, self.selection_end)))

    def selection_text(self) -> str:
        return self.text_between(*self.selection_range())

    def remove_selection(self) -> bool:
        if not self.has_selection:
            return False
        start, end = self.selection_range()
        self.delete_range(start, end)
        self._place(start)
        return True

    def select_to(self, loc: Loc):
        self.selection_end = self.clamp(loc)

    def select_all(self):
        self.selection_end = Loc.zeroes()
        self.cursor = Loc(x=len(self.lines[-1]), y=len(self.lines) - 1)

    def cancel_selection(self):
        self.selection_end = self.cursor

    # cursor motion; every move drops the selection unless asked to extend it

    def clamp(self, loc: Loc) -> Loc:
        y = max(0, min(loc.y, len(self.lines) - 1))
        x = max(0, min(loc.x, len(self.lines[y])))
        return Loc(x=x, y=y)

    def _place(self, loc: Loc, extend: bool = False, keep_column: bool = False):
        self.cursor = self.clamp(loc)
        if not keep_column:
            self.old_x = self.cursor.x
        if not extend:
            self.selection_end = self.cursor

    def move_to(self, loc: Loc):
        self._place(loc)

    def move_to_y(self, y: int):
        self._place(Loc(x=self.cursor.x, y=y))

    def move_left(self, extend: bool = False):
        if self.cursor.x > 0:
            self._place(Loc(x=self.cursor.x - 1, y=self.cursor.y), extend)
        elif self.cursor.y > 0:
            self._place(Loc(x=len(self.lines[self.cursor.y - 1]), y=self.cursor.y - 1), extend)

    def move_right(self, extend: bool = False):
        if self.cursor.x < len(self.lines[self.cursor.y]):
            self._place(Loc(x=self.cursor.x + 1, y=self.cursor.y), extend)
        elif self.cursor.y + 1 < len(self.lines):
            self._place(Loc(x=0, y=self.cursor.y + 1), extend)

    def move_up(self, extend: bool = False):
        if self.cursor.y > 0:
            self._place(Loc(x=self.old_x, y=self.cursor.y - 1), extend, keep_column=True)

    def move_down(self, extend: bool = False):
        if self.cursor.y + 1 < len(self.lines):
            self._place(Loc(x=self.old_x, y=self.cursor.y + 1), extend, keep_column=True)

    def move_home(self):
        self._place(Loc(x=0, y=self.cursor.y))

    def move_end(self):
        self._place(Loc(x=len(self.lines[self.cursor.y]), y=self.cursor.y))

    def move_top(self):
        self._place(Loc.zeroes())

    def move_bottom(self):
        self._place(Loc(x=len(self.lines[-1]), y=len(self.lines) - 1))

    def move_page_up(self):
        self._place(Loc(x=self.old_x, y=self.cursor.y - self.size.height), keep_column=True)

    def move_page_down(self):
        self._place(Loc(x=self.old_x, y=self.cursor.y + self.size.height), keep_column=True)

    def _previous_word_start(self, loc: Loc) -> Loc:
        line = self.lines[loc.y]
        x = loc.x
        while x > 0 and not self.word_char(line[x - 1]):
            x -= 1
        while x > 0 and self.word_char(line[x - 1]):
            x -= 1
        return Loc(x=x, y=loc.y)

    def move_previous_word(self):
        if self.cursor.x == 0:
            self.move_left()
            return
        self._place(self._previous_word_start(self.cursor))

    def move_next_word(self):
        line = self.lines[self.cursor.y]
        x = self.cursor.x
        if x == len(line):
            self.move_right()
            return
        while x < len(line) and not self.word_char(line[x]):
            x += 1
        while x < len(line) and self.word_char(line[x]):
            x += 1
        self._place(Loc(x=x, y=self.cursor.y))

    def bring_cursor_in_viewport(self):
        height = max(1, self.size.height)
        if self.cursor.y < self.offset:
            self.offset = self.cursor.y
        elif self.cursor.y >= self.offset + height:
            self.offset = self.cursor.y - height + 1

    # searching

    def find_next(self, query: str, start: Loc) -> typing.Optional[Loc]:
        if not query:
            return None
        for y in range(start.y, len(self.lines)):
            x = self.lines[y].find(query, start.x if y == start.y else 0)
            if x != -1:
                return Loc(x=x, y=y)
        return None

    def find_previous(self, query: str, start: Loc) -> typing.Optional[Loc]:
        if not query:
            return None
        for y in range(start.y, -1, -1):
            line = self.lines[y] if y != start.y else self.lines[y][: start.x]
            x = line.rfind(query)
            if x != -1:
                return Loc(x=x, y=y)
        return None

    def replace_all(self, target: str, replacement: str) -> int:
        self._check_writable()
        if not target:
            return 0
        count = 0
        for y, line in enumerate(self.lines):
            if target in line:
                count += line.count(target)
                self.lines[y] = line.replace(target, replacement)
        if count:
            self.modified = True
            self._place(self.cursor)
            self.commit()
        return count

    @staticmethod
    def word_char(c: typing.Optional[str]):
        if c is None:
            return False
        return c == "_" or unicodedata.category(c)[0] in ("L", "M", "N")

    @staticmethod
    def whitespace_char(c: typing.Optional[str]):
        if c is None:
            return False
        return unicodedata.category(c).startswith("Z") or c == "\t"


class FileContainer:
    """An open document, with what the editor knows about it beyond its text."""

    def __init__(self, doc: Document, file_type: str):
        self.doc = doc
        self.file_type = file_type
        self.highlighter = Highlighter(file_type)
        self.highlighter.invalidate_all(doc.len_lines())

    @property
    def name(self):
        if self.doc.file_name is None:
            return "[No Name]"
        return pathlib.Path(self.doc.file_name).name
