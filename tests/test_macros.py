from plume.device.hwtypes import KeyCode, KeyEvent
from plume.editor.macros import MacroManager

EVENTS = [KeyEvent.char("h"), KeyEvent.char("i"), KeyEvent.named(KeyCode.ENTER)]


def recorded(events=EVENTS):
    macros = MacroManager()
    macros.record()
    for event in events:
        macros.register(event)
    macros.finish()
    return macros


def drain(macros: MacroManager):
    played = []
    while (event := macros.next()) is not None:
        played.append(event)
    return played


def test_play_once():
    macros = recorded()
    macros.play(1)
    assert macros.playing
    assert drain(macros) == EVENTS
    assert not macros.playing
    assert macros.next() is None


def test_play_repeatedly():
    macros = recorded()
    macros.play(3)
    assert drain(macros) == EVENTS * 3
    assert not macros.playing


def test_register_only_while_recording():
    macros = MacroManager()
    macros.register(KeyEvent.char("x"))
    assert macros.events == []
    macros.play()
    assert not macros.playing


def test_record_clears_previous_macro():
    macros = recorded()
    macros.record()
    assert macros.events == []
    macros.register(KeyEvent.char("z"))
    macros.finish()
    assert macros.events == [KeyEvent.char("z")]


def test_record_while_recording_keeps_buffer():
    macros = MacroManager()
    macros.record()
    macros.register(KeyEvent.char("a"))
    macros.record()
    assert macros.events == [KeyEvent.char("a")]


def test_finish_is_idempotent():
    macros = recorded()
    macros.play(2)
    macros.next()
    macros.finish()
    state = (macros.recording, macros.playing, list(macros.events), macros.remaining)
    macros.finish()
    assert (macros.recording, macros.playing, list(macros.events), macros.remaining) == state
    assert state[:2] == (False, False)


def test_playing_ends_recording():
    macros = MacroManager()
    macros.record()
    macros.register(KeyEvent.char("a"))
    macros.play()
    assert not macros.recording
    assert macros.playing
    assert drain(macros) == [KeyEvent.char("a")]


def test_cannot_record_while_playing():
    macros = recorded()
    macros.play()
    macros.record()
    assert not macros.recording
    assert drain(macros) == EVENTS


def test_discard_drops_only_the_given_trailing_event():
    stop = KeyEvent.char("r", alt=True)
    macros = MacroManager()
    macros.record()
    macros.register(EVENTS[0])
    macros.register(stop)
    macros.discard(KeyEvent.char("q"))
    assert macros.events == [EVENTS[0], stop]
    macros.discard(stop)
    assert macros.events == [EVENTS[0]]
