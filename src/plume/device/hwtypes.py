from __future__ import annotations

import enum
import typing

import msgspec

from ..commontypes import PlumeError, Size


class HardwareError(PlumeError):
    pass


class KeyCode(enum.Enum):
    CHAR = "char"
    BACKSPACE = "backspace"
    ENTER = "enter"
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    PAGEUP = "pageup"
    PAGEDOWN = "pagedown"
    TAB = "tab"
    BACKTAB = "backtab"
    DELETE = "delete"
    INSERT = "insert"
    FUNCTION = "f"
    ESC = "esc"
    NULL = "null"


class KeyPress(enum.IntEnum):
    RELEASED = 0
    PRESSED = 1
    REPEATED = 2


class ModifierAnnotation(msgspec.Struct, frozen=True):
    alt: bool = False
    ctrl: bool = False
    shift: bool = False

    @property
    def is_plain(self):
        return not (self.alt or self.ctrl or self.shift)


class KeyEvent(msgspec.Struct, frozen=True):
    key: KeyCode
    character: typing.Optional[str] = None
    function: int = 0
    annotation: ModifierAnnotation = msgspec.field(default_factory=ModifierAnnotation)
    press: KeyPress = KeyPress.PRESSED

    @classmethod
    def char(cls, character: str, **modifiers: bool):
        return cls(key=KeyCode.CHAR, character=character, annotation=ModifierAnnotation(**modifiers))

    @classmethod
    def named(cls, key: KeyCode, **modifiers: bool):
        return cls(key=key, annotation=ModifierAnnotation(**modifiers))

    @property
    def is_release(self):
        return self.press is KeyPress.RELEASED


class ResizeEvent(msgspec.Struct, frozen=True):
    size: Size


class PasteEvent(msgspec.Struct, frozen=True):
    text: str


TerminalEvent = KeyEvent | ResizeEvent | PasteEvent
