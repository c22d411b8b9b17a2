import pytest

from plume.commontypes import DocumentError, Loc
from plume.editor.document import Document


def typed(text: str, doc=None):
    doc = doc or Document()
    for ch in text:
        if ch == "\n":
            doc.enter()
        else:
            doc.insert_char(ch)
    return doc


def test_typing_and_enter():
    doc = typed("hello\nworld")
    assert doc.lines == ["hello", "world"]
    assert doc.cursor == Loc(x=5, y=1)
    assert doc.modified


def test_backspace_joins_lines():
    doc = typed("ab\ncd")
    doc.move_to(Loc(x=0, y=1))
    doc.backspace()
    assert doc.lines == ["abcd"]
    assert doc.cursor == Loc(x=2, y=0)
    doc.move_top()
    doc.backspace()
    assert doc.lines == ["abcd"]


def test_delete_joins_lines():
    doc = typed("ab\ncd")
    doc.move_to(Loc(x=2, y=0))
    doc.delete()
    assert doc.lines == ["abcd"]
    doc.move_bottom()
    doc.delete()
    assert doc.lines == ["abcd"]


def test_delete_word_and_line():
    doc = typed("one two  ")
    doc.delete_word()
    assert doc.lines == ["one "]
    doc.delete_line()
    assert doc.lines == [""]


def test_vertical_motion_remembers_column():
    doc = Document(lines=["long line", "ab", "another long line"])
    doc.move_to(Loc(x=7, y=0))
    doc.move_down()
    assert doc.cursor == Loc(x=2, y=1)
    doc.move_down()
    assert doc.cursor == Loc(x=7, y=2)


def test_word_motion():
    doc = Document(lines=["foo bar_baz, qux"])
    doc.move_next_word()
    assert doc.cursor.x == 3
    doc.move_next_word()
    assert doc.cursor.x == 11
    doc.move_previous_word()
    assert doc.cursor.x == 4


def test_page_motion():
    doc = Document(lines=[str(n) for n in range(100)])
    doc.move_page_down()
    assert doc.cursor.y == doc.size.height
    doc.move_page_up()
    assert doc.cursor.y == 0
    doc.move_bottom()
    assert doc.cursor == Loc(x=2, y=99)
    doc.bring_cursor_in_viewport()
    assert doc.offset == 99 - doc.size.height + 1


def test_swap_lines():
    doc = Document(lines=["a", "b", "c"])
    doc.move_to(Loc(x=0, y=1))
    doc.swap_line_up()
    assert doc.lines == ["b", "a", "c"]
    assert doc.cursor.y == 0
    doc.swap_line_up()
    assert doc.lines == ["b", "a", "c"]
    doc.swap_line_down()
    assert doc.lines == ["a", "b", "c"]


def test_selection_replaced_by_typing():
    doc = Document(lines=["hello world"])
    doc.move_to(Loc(x=6, y=0))
    doc.select_to(Loc(x=11, y=0))
    assert doc.selection_text() == "world"
    typed("there", doc)
    assert doc.lines == ["hello there"]


def test_select_all():
    doc = Document(lines=["ab", "cd"])
    doc.select_all()
    assert doc.selection_text() == "ab\ncd"


def test_multiline_insert():
    doc = Document(lines=["ad"])
    end = doc.insert(Loc(x=1, y=0), "b\nc")
    assert doc.lines == ["ab", "cd"]
    assert end == Loc(x=1, y=1)


def test_undo_redo():
    doc = typed("one two")
    doc.undo()
    assert doc.lines == ["one "]
    doc.undo()
    assert doc.lines == [""]
    with pytest.raises(DocumentError):
        doc.undo()
    doc.redo()
    doc.redo()
    assert doc.lines == ["one two"]
    with pytest.raises(DocumentError):
        doc.redo()


def test_new_edit_clears_redo():
    doc = typed("one ")
    doc.undo()
    typed("x", doc)
    doc.commit()
    with pytest.raises(DocumentError):
        doc.redo()


def test_read_only():
    doc = Document(lines=["fixed"])
    doc.read_only = True
    for edit in (doc.enter, doc.delete_line, doc.undo, lambda: doc.insert_char("x"), lambda: doc.replace_all("f", "g")):
        with pytest.raises(DocumentError, match="read only"):
            edit()
    assert doc.lines == ["fixed"]


def test_search():
    doc = Document(lines=["cat dog", "dog cat"])
    assert doc.find_next("dog", Loc.zeroes()) == Loc(x=4, y=0)
    assert doc.find_next("dog", Loc(x=5, y=0)) == Loc(x=0, y=1)
    assert doc.find_previous("cat", Loc(x=3, y=1)) == Loc(x=0, y=0)
    assert doc.find_next("", Loc.zeroes()) is None


def test_replace_all():
    doc = Document(lines=["a-a", "b", "a"])
    assert doc.replace_all("a", "xy") == 3
    assert doc.lines == ["xy-xy", "b", "xy"]
    assert doc.replace_all("q", "z") == 0


def test_open_and_save(tmp_path):
    path = tmp_path / "file.txt"
    path.write_text("first\nsecond\n")
    doc = Document.open(path)
    assert doc.lines == ["first", "second", ""]
    assert not doc.modified
    typed("!", doc)
    doc.save()
    assert path.read_text() == "!first\nsecond\n"
    assert not doc.modified


def test_open_missing_file_starts_empty(tmp_path):
    doc = Document.open(tmp_path / "new.txt")
    assert doc.lines == [""]
    assert doc.file_name == str(tmp_path / "new.txt")


def test_save_without_name():
    with pytest.raises(DocumentError):
        Document().save()
