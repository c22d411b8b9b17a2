# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import pytest
import trio

from plume.app import Editor
from plume.device.hardware import EventTestHardware
from plume.settings import Settings


@pytest.fixture
def settings(tmp_path):
    return Settings.for_test(config_path=str(tmp_path / "missing_config.py"))


@pytest.fixture
def input_channels():
    return trio.open_memory_channel(60)


@pytest.fixture
def keyboard(input_channels):
    send_channel, _ = input_channels
    return send_channel


@pytest.fixture
def hardware(input_channels):
    _, receive_channel = input_channels
    return EventTestHardware(receive_channel)


@pytest.fixture
async def editor(hardware, settings):
    editor = Editor(hardware, settings)
    editor.new_if_empty()
    await editor.host.bootstrap()
    return editor


@pytest.fixture
async def binding(editor):
    return editor.host.namespace["editor"]
