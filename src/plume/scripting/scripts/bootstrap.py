# Runs before any configuration. Everything defined here is visible to config files and plugins.
# `editor`, `table` and `ScriptRuntimeError` are provided by the host.
import inspect

key_bindings = {}
before_key_bindings = {}
commands = {}
plugins = []


def error(message):
    raise ScriptRuntimeError(message)


async def _call(fn, *args):
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def run_key(key):
    handler = key_bindings.get(key)
    if handler is None:
        error(f"{key}: key not bound")
    return await _call(handler)


async def run_key_before(key):
    handler = before_key_bindings.get(key)
    if handler is not None:
        return await _call(handler)


async def run_command(name, arguments):
    handler = commands.get(name)
    if handler is None:
        error(f"{name}: command not found")
    return await _call(handler, arguments)


def bind(key, before=False):
    """Decorator form of key_bindings[key] = fn."""
    def register(fn):
        (before_key_bindings if before else key_bindings)[key] = fn
        return fn
    return register


def command(name=None):
    def register(fn):
        commands[name or fn.__name__] = fn
        return fn
    return register


def load_plugin(name):
    if name not in plugins:
        plugins.append(name)


def every(interval):
    """Run the decorated function repeatedly while the editor waits for input."""
    def register(fn):
        editor.schedule(fn.__name__, interval)
        return fn
    return register
