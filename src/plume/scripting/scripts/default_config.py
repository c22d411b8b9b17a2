# The configuration used when there is no config file. Copy it to ~/.config/plume/config.py to customise.

# Movement
key_bindings["up"] = editor.move_up
key_bindings["down"] = editor.move_down
key_bindings["left"] = editor.move_left
key_bindings["right"] = editor.move_right
key_bindings["home"] = editor.move_home
key_bindings["end"] = editor.move_end
key_bindings["pageup"] = editor.move_page_up
key_bindings["pagedown"] = editor.move_page_down
key_bindings["ctrl_up"] = editor.move_top
key_bindings["ctrl_down"] = editor.move_bottom
key_bindings["ctrl_left"] = editor.move_previous_word
key_bindings["ctrl_right"] = editor.move_next_word
key_bindings["alt_up"] = editor.move_line_up
key_bindings["alt_down"] = editor.move_line_down

# Selection
key_bindings["shift_up"] = editor.select_up
key_bindings["shift_down"] = editor.select_down
key_bindings["shift_left"] = editor.select_left
key_bindings["shift_right"] = editor.select_right
key_bindings["ctrl_a"] = editor.select_all
key_bindings["esc"] = editor.cancel_selection

# Editing
key_bindings["ctrl_z"] = editor.undo
key_bindings["ctrl_y"] = editor.redo
key_bindings["ctrl_x"] = editor.cut
key_bindings["ctrl_c"] = editor.copy
key_bindings["ctrl_v"] = editor.paste
key_bindings["ctrl_d"] = editor.remove_line
key_bindings["ctrl_w"] = editor.remove_word

# Documents
key_bindings["ctrl_n"] = editor.new
key_bindings["ctrl_o"] = editor.open
key_bindings["ctrl_s"] = editor.save
key_bindings["alt_s"] = editor.save_as
key_bindings["ctrl_q"] = editor.quit
key_bindings["backtab"] = editor.previous_tab
key_bindings["alt_right"] = editor.next_tab
key_bindings["alt_left"] = editor.previous_tab

# Searching
key_bindings["ctrl_f"] = editor.search
key_bindings["ctrl_r"] = editor.replace

# Command line
key_bindings["ctrl_k"] = editor.open_command_line


# Macros
@bind("alt_r")
def toggle_macro_recording():
    if editor.macro_recording:
        editor.macro_record_stop()
        editor.display_info("Macro recorded")
    else:
        editor.macro_record_start()
        editor.display_info("Recording macro")


@bind("alt_p")
def play_macro():
    editor.macro_play(1)


# Commands
@command()
def readonly(arguments):
    match arguments:
        case ["true"]:
            editor.set_read_only(True)
        case ["false"]:
            editor.set_read_only(False)
        case _:
            error("readonly takes true or false")


@command()
def filetype(arguments):
    if not arguments:
        error("filetype needs the name of a file type")
    name = " ".join(arguments)
    editor.set_file_type(name)
    if editor.document_type == name:
        editor.display_info(f"File type is now {name}")


@command()
def goto(arguments):
    if len(arguments) != 1 or not arguments[0].isdigit():
        error("goto needs a line number")
    editor.move_to(0, int(arguments[0]))


@command()
def replace(arguments):
    if len(arguments) != 2:
        error("replace needs a target and a replacement")
    editor.replace_all(arguments[0], arguments[1])


@command()
def tab(arguments):
    if len(arguments) != 1 or not arguments[0].isdigit():
        error("tab needs a document number")
    editor.move_to_document(int(arguments[0]))
