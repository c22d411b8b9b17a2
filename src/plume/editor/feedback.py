import enum

import msgspec


class FeedbackKind(enum.Enum):
    NONE = enum.auto()
    INFO = enum.auto()
    WARNING = enum.auto()
    ERROR = enum.auto()


class Feedback(msgspec.Struct, frozen=True):
    """The single status message shown under the document. Whoever writes last in a loop iteration wins."""

    kind: FeedbackKind = FeedbackKind.NONE
    text: str = ""

    @property
    def is_none(self):
        return self.kind is FeedbackKind.NONE

    @classmethod
    def none(cls):
        return cls()

    @classmethod
    def info(cls, text: str):
        return cls(kind=FeedbackKind.INFO, text=text)

    @classmethod
    def warning(cls, text: str):
        return cls(kind=FeedbackKind.WARNING, text=text)

    @classmethod
    def error(cls, text: str):
        return cls(kind=FeedbackKind.ERROR, text=text)
