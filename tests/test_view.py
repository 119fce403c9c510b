from dataclasses import replace

from envtoggle.model import Model
from envtoggle.parser import parse_lines
from envtoggle import view

SAMPLE = ["DB=postgres", "# DB=sqlite", "EMPTY=", "# OFF=1"]


def make_model(lines=SAMPLE, width=80, height=24):
    model = Model(".env", parse_lines(lines))
    model.resize(width, height)
    return model


def plain(row):
    return "".join(seg.text for seg in row)


def test_render_before_resize_is_initializing():
    model = Model(".env", parse_lines(SAMPLE))
    assert view.render(model) == "Initializing..."


def test_render_when_quitting_shows_status():
    model = make_model()
    model.quitting = True
    model.status_message = "Saved successfully! Quitting..."
    assert view.render(model) == "Saved successfully! Quitting...\n"
    model.status_message = ""
    assert view.render(model) == ""


def test_render_fills_terminal_height():
    model = make_model(height=12)
    lines = view.render(model).split("\n")
    assert len(lines) == 12
    assert view.HELP_TEXT in lines[-1]


def test_header_spans_width_and_names_file():
    model = make_model(width=60)
    row = view.render_header(model)
    assert sum(seg.width for seg in row) == 60
    text = plain(row)
    assert text.startswith(" " + view.TITLE)
    assert text.rstrip().endswith("File: .env")


def test_header_shows_modified_mark():
    model = make_model()
    model.modified = True
    row = view.render_header(model)
    marks = [seg for seg in row if seg.text == view.MODIFIED_MARK]
    assert len(marks) == 1
    assert marks[0].style.foreground == view.ORANGE
    assert marks[0].style.background == view.PURPLE


def test_header_is_cut_to_narrow_width():
    model = make_model(width=10)
    assert sum(seg.width for seg in view.render_header(model)) == 10


def test_footer_default_help():
    model = make_model()
    margin, content = view.render_footer(model)
    assert margin == []
    assert plain(content).startswith(view.HELP_TEXT)


def test_footer_prompts_take_precedence():
    model = make_model()
    model.status_message = "Saving..."
    model.show_reload_prompt = True
    assert plain(view.render_footer(model)[1]).startswith(view.RELOAD_PROMPT)
    model.show_quit_prompt = True
    content = view.render_footer(model)[1]
    assert plain(content).startswith(view.QUIT_PROMPT)
    assert content[0].style == view.PROMPT


def test_footer_status_styles():
    model = make_model()
    model.status_message = "Error: boom"
    assert view.render_footer(model)[1][0].style == view.ERROR_MESSAGE
    model.status_message = "No changes to save."
    content = view.render_footer(model)[1]
    assert content[0] == view.Segment("No changes to save.", view.STATUS_MESSAGE)


def test_list_rows_match_items():
    model = make_model()
    rows = view.render_list(model)
    items = model.build_list_items()
    assert len(rows) == len(items)
    for row, item in zip(rows, items):
        assert row[1].text == item.prefix
        assert row[2].text == (item.key if item.is_group_header else item.value)


def test_cursor_row_has_pointer():
    model = make_model()
    model.move_down()
    rows = view.render_list(model)
    pointers = [i for i, row in enumerate(rows) if row[0].text == "> "]
    assert pointers == [model.cursor]
    assert rows[model.cursor][0].style == view.FOCUSED_LINE


def test_empty_value_placeholder_style():
    model = make_model()
    rows = view.render_list(model)
    empty = [row for row in rows if row[2].text == "<empty>"]
    assert len(empty) == 1
    assert empty[0][2].style == view.EMPTY_VALUE


def test_disabled_rows_use_comment_colour():
    model = make_model()
    rows = view.render_list(model)
    last = rows[-1]
    assert last[2].text == "1"
    assert last[2].style == view.DISABLED_LINE
    assert last[1].text.strip() == "*"


def test_active_icons_are_green():
    model = make_model()
    rows = view.render_list(model)
    items = model.build_list_items()
    for row, item in zip(rows[1:], items[1:]):
        if item.is_active and not item.is_disabled:
            assert row[1].style.foreground == view.GREEN


def test_style_inherit_keeps_own_values():
    own = view.Style(view.RED)
    merged = own.inherit(view.HEADER)
    assert merged.foreground == view.RED
    assert merged.background == view.PURPLE
    assert merged.bold is True
    assert replace(merged, bold=False).inherit(view.Style()).bold is False


def test_visible_rows_follow_cursor():
    lines = [f"K{i}=v{i}" for i in range(10)]
    model = make_model(lines, width=40, height=8)
    assert len(view.visible_rows(model)) == model.viewport_height
    for _ in range(12):
        model.move_down()
    rows = view.visible_rows(model)
    assert len(rows) == model.viewport_height
    assert any(row[0].text == "> " for row in rows)
    assert view.visible_rows(model) == view.render_list(model)[
        model.y_offset : model.y_offset + model.viewport_height
    ]