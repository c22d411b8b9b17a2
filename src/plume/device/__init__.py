# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# Terminal input stages
# stage 0: raw bytes from the tty, read by Hardware.run
# stage 1: bytes decoded into text (keystreams.DecodeText)
# stage 2: text parsed into key, paste and resize events (keystreams.ParseKeys)
# the editor takes it from there: macro playback, release filtering, then key strings for scripts
