# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

import outcome

from ..commontypes import PlumeError
from ..editor.feedback import Feedback

if typing.TYPE_CHECKING:
    from ..app import Editor

logger = logging.getLogger(__name__)

# the bootstrap script raises errors ending in these phrases
KEY_NOT_BOUND = "key not bound"
COMMAND_NOT_FOUND = "command not found"


class ScriptError(PlumeError):
    pass


class ScriptRuntimeError(ScriptError):
    """Script code raised while running."""


class ScriptLoadError(ScriptError):
    """Script source could not be compiled or read."""


class ScriptHostError(ScriptError):
    """The interpreter itself gave out: recursion too deep, or out of memory."""


def _reportable_key(key_str: str) -> bool:
    # pure modifier chords and plain keys never warn
    return "_" in key_str and key_str != "_" and not key_str.startswith("shift")


def classify(result: outcome.Outcome, key_str: str) -> typing.Optional[Feedback]:
    if isinstance(result, outcome.Value):
        return None
    error = result.error
    if not isinstance(error, ScriptRuntimeError):
        return Feedback.error(f"Failed to run script: {error}")
    lines = str(error).strip().splitlines()
    message = lines[0] if lines else ""
    if message.endswith(KEY_NOT_BOUND):
        key = key_str.replace(" ", "space")
        if _reportable_key(key):
            return Feedback.warning(f"The key {key} is not bound")
        return None
    if message.endswith(COMMAND_NOT_FOUND):
        return Feedback.error(f"The command '{key_str}' is not defined")
    return Feedback.error(message or type(error).__name__)


def handle_script_result(editor: Editor, key_str: str, result: outcome.Outcome) -> typing.Optional[Feedback]:
    feedback = classify(result, key_str)
    if feedback is not None:
        logger.debug("Script result for %r: %s", key_str, feedback.text)
        editor.feedback = feedback
    return feedback
