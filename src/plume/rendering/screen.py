# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

from ..commontypes import Size
from ..device.hardware import CSI, Hardware
from ..editor.feedback import FeedbackKind
from ..settings import Settings

if typing.TYPE_CHECKING:
    from ..app import Editor

logger = logging.getLogger(__name__)

RESET = f"{CSI}0m"
INVERSE = f"{CSI}7m"
FEEDBACK_STYLES = {
    FeedbackKind.NONE: "",
    FeedbackKind.INFO: f"{CSI}34m",
    FeedbackKind.WARNING: f"{CSI}33m",
    FeedbackKind.ERROR: f"{CSI}31m",
}

# one row of tabs at the top; status and feedback lines at the bottom
CHROME_ROWS = 3


class Renderer:
    def __init__(self, hardware: Hardware, settings: Settings):
        self.hardware = hardware
        self.settings = settings

    def document_size(self) -> Size:
        screen = self.hardware.size()
        return Size(width=screen.width, height=max(1, screen.height - CHROME_ROWS))

    def _gutter_width(self, editor: Editor):
        if not self.settings.line_numbers:
            return 0
        return len(str(editor.doc.len_lines())) + 1

    def _expand(self, text: str):
        return text.replace("\t", " " * self.settings.tab_width)

    def render(self, editor: Editor):
        hw = self.hardware
        width = hw.size().width
        doc = editor.doc
        doc.size = self.document_size()
        doc.bring_cursor_in_viewport()
        hw.hide_cursor()

        hw.goto(0, 0)
        hw.clear_line()
        tabs = []
        for i, container in enumerate(editor.files):
            label = f" {container.name}{'[+]' if container.doc.modified else ''} "
            tabs.append(f"{INVERSE}{label}{RESET}" if i == editor.ptr else label)
        hw.write("".join(tabs))

        gutter = self._gutter_width(editor)
        for row in range(doc.size.height):
            y = doc.offset + row
            hw.goto(0, row + 1)
            hw.clear_line()
            line = doc.line(y)
            if line is None:
                hw.write("~")
                continue
            if gutter:
                hw.write(f"{y + 1:>{gutter - 1}} ")
            hw.write(self._expand(line)[: max(0, width - gutter)])

        self.render_status_line(editor)
        self.render_feedback_line(editor)
        editor.needs_rerender = False

    def render_status_line(self, editor: Editor):
        hw = self.hardware
        screen = hw.size()
        doc = editor.doc
        left = f" {editor.file.name}{'[+]' if doc.modified else ''}{' [read only]' if doc.read_only else ''} | {editor.file.file_type}"
        if editor.macro_man.recording:
            left += " | recording"
        right = f"{doc.cursor.y + 1}:{doc.cursor.x} / {doc.len_lines()} "
        padding = max(1, screen.width - len(left) - len(right))
        hw.goto(0, screen.height - 2)
        hw.clear_line()
        hw.write(f"{INVERSE}{(left + ' ' * padding + right)[: screen.width]}{RESET}")
        self.place_cursor(editor)

    def render_feedback_line(self, editor: Editor):
        hw = self.hardware
        screen = hw.size()
        feedback = editor.feedback
        hw.goto(0, screen.height - 1)
        hw.clear_line()
        if not feedback.is_none:
            hw.write(f"{FEEDBACK_STYLES[feedback.kind]}{feedback.text[: screen.width]}{RESET}")
        self.place_cursor(editor)

    def render_prompt(self, question: str, answer: str):
        hw = self.hardware
        screen = hw.size()
        text = f"{question}: {answer}"[-screen.width :]
        hw.goto(0, screen.height - 1)
        hw.clear_line()
        hw.write(text)
        hw.show_cursor()
        hw.flush()

    def place_cursor(self, editor: Editor):
        doc = editor.doc
        line = doc.line(doc.cursor.y) or ""
        x = self._gutter_width(editor) + len(self._expand(line[: doc.cursor.x]))
        self.hardware.goto(x, doc.cursor.y - doc.offset + 1)
        self.hardware.show_cursor()
        self.hardware.flush()
