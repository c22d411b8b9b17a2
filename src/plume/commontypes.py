# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import msgspec


class Loc(msgspec.Struct, frozen=True, order=True):
    # ordering compares y before x, so that it follows reading order
    y: int
    x: int

    @classmethod
    def zeroes(cls):
        return cls(x=0, y=0)


class Size(msgspec.Struct, frozen=True):
    width: int
    height: int


class PlumeError(Exception):
    pass


class FatalError(PlumeError):
    """Unrecoverable; the process reports the message and exits."""


class DocumentError(PlumeError):
    pass
