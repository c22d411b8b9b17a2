# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import ast
import builtins
import importlib.resources
import inspect
import logging
import pathlib
import types
import typing

import outcome

from ..commontypes import FatalError
from .errors import ScriptError, ScriptHostError, ScriptLoadError, ScriptRuntimeError

if typing.TYPE_CHECKING:
    from ..app import Editor

logger = logging.getLogger(__name__)

SCRIPTS = importlib.resources.files(__package__) / "scripts"


def packaged_script(name: str) -> str:
    return (SCRIPTS / name).read_text(encoding="utf-8")


class ScriptHost:
    """Runs configuration and plugin code, all of it sharing one namespace.

    Scripts are Python source. They may use await at the top level, and any function they register may be
    a coroutine function; the host awaits whatever comes back awaitable. Every run produces an outcome,
    except FatalError, which is left to end the process.
    """

    namespace: dict[str, typing.Any]

    def __init__(self, editor: Editor):
        self.editor = editor
        self.namespace = {}

    def reset(self):
        from .binding import EditorBinding

        self.namespace = {
            "__name__": "plume_config",
            "__builtins__": builtins,
            "editor": EditorBinding(self.editor),
            "table": self.table,
            "ScriptRuntimeError": ScriptRuntimeError,
        }

    async def bootstrap(self):
        self.reset()
        result = await self.execute(packaged_script("bootstrap.py"), "<bootstrap>")
        # without the bootstrap helpers no key could ever be handled
        result.unwrap()

    async def load_default_config(self) -> outcome.Outcome:
        return await self.execute(packaged_script("default_config.py"), "<default config>")

    async def load_file(self, path: pathlib.Path) -> outcome.Outcome:
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return outcome.Error(ScriptLoadError(f"Unable to read {path}: {exc}"))
        logger.debug("Loading script %s", path)
        return await self.execute(source, str(path))

    async def execute(self, source: str, filename: str = "<script>") -> outcome.Outcome:
        try:
            code = compile(source, filename, "exec", flags=ast.PyCF_ALLOW_TOP_LEVEL_AWAIT)
        except (SyntaxError, ValueError) as exc:
            return outcome.Error(ScriptLoadError(f"{filename}: {exc}"))
        return await self.invoke(eval, code, self.namespace)

    def lookup(self, name: str) -> typing.Optional[typing.Callable]:
        candidate = self.namespace.get(name)
        return candidate if callable(candidate) else None

    async def invoke(self, fn: typing.Callable, *args) -> outcome.Outcome:
        try:
            result = fn(*args)
            if inspect.isawaitable(result):
                result = await result
        except FatalError:
            raise
        except ScriptError as exc:
            return outcome.Error(exc)
        except (RecursionError, MemoryError) as exc:
            return outcome.Error(ScriptHostError(f"{type(exc).__name__}: {exc}"))
        except Exception as exc:
            logger.debug("Script raised", exc_info=True)
            return outcome.Error(ScriptRuntimeError(str(exc) or type(exc).__name__))
        return outcome.Value(result)

    async def call(self, name: str, *args) -> typing.Optional[outcome.Outcome]:
        """Invoke a global function by name; None if there is no such function."""
        fn = self.lookup(name)
        if fn is None:
            return None
        return await self.invoke(fn, *args)

    @staticmethod
    def table(**fields):
        return types.SimpleNamespace(**fields)
