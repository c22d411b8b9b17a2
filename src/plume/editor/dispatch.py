# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

from ..commontypes import DocumentError
from ..device.hwtypes import KeyCode, KeyEvent, TerminalEvent
from ..scripting.errors import handle_script_result
from .feedback import Feedback

if typing.TYPE_CHECKING:
    from ..app import Editor

logger = logging.getLogger(__name__)


def key_to_string(event: KeyEvent) -> str:
    """The name scripts bind a key under, such as "ctrl_s", "alt_shift_left" or "f5"."""
    modifiers = event.annotation
    prefix = ""
    if modifiers.ctrl:
        prefix += "ctrl_"
    if modifiers.alt:
        prefix += "alt_"
    if modifiers.shift:
        prefix += "shift_"
    match event.key:
        case KeyCode.CHAR:
            name = event.character.lower()
        case KeyCode.FUNCTION:
            name = f"f{event.function}"
        case _:
            name = event.key.value
    return prefix + name


def quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n").replace("\r", "\\r")
    return f"'{escaped}'"


async def run_hook(editor: Editor, key_str: str, before: bool):
    helper = "run_key_before" if before else "run_key"
    result = await editor.host.execute(f"await {helper}({quote(key_str)})", f"<{helper} {key_str}>")
    handle_script_result(editor, key_str, result)


async def dispatch_event(editor: Editor, event: TerminalEvent):
    key_str = key_to_string(event) if isinstance(event, KeyEvent) else None
    if key_str is not None:
        await run_hook(editor, key_str, before=True)
    try:
        await editor.handle_event(event)
    except DocumentError as exc:
        editor.feedback = Feedback.error(str(exc))
    if key_str is not None:
        await run_hook(editor, key_str, before=False)
    editor.update_highlighter()
    if editor.command is not None:
        command, editor.command = editor.command, None
        await run_editor_command(editor, command)


async def run_editor_command(editor: Editor, command: str):
    parts = command.strip().split(maxsplit=1)
    if not parts:
        return
    subcmd = parts[0]
    arguments = parts[1].split() if len(parts) > 1 else []
    source = f"await run_command({quote(subcmd)}, [{', '.join(quote(arg) for arg in arguments)}])"
    logger.debug("Running command %r", command)
    result = await editor.host.execute(source, f"<command {subcmd}>")
    handle_script_result(editor, subcmd, result)
