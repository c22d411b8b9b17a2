from plume.commontypes import Size
from plume.editor.feedback import Feedback


def screen_text(hardware):
    return "".join(hardware.flushed)


async def test_full_render(editor, hardware, binding):
    binding.insert("hello\n\tworld")
    editor.feedback = Feedback.warning("watch out")
    editor.needs_rerender = True
    editor.render()
    text = screen_text(hardware)
    assert "[No Name][+]" in text
    assert "1 hello" in text
    assert "2     world" in text
    assert "2:6 / 2" in text
    assert "watch out" in text
    assert not editor.needs_rerender
    assert editor.doc.size == Size(width=80, height=21)


async def test_partial_render_skips_document(editor, hardware, binding):
    binding.insert("hidden")
    editor.needs_rerender = False
    editor.render()
    text = screen_text(hardware)
    assert "hidden" not in text
    assert "1:6 / 1" in text


async def test_prompt_line(editor, hardware):
    editor.renderer.render_prompt("Search", "needle")
    assert "Search: needle" in screen_text(hardware)
