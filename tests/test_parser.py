import pytest

from envtoggle.parser import LineType, parse_file, parse_lines

SAMPLE = [
    "# Database settings",
    "DATABASE_URL=postgres://localhost/dev",
    "# DATABASE_URL=postgres://localhost/prod",
    "",
    "  #  API_MODE = 'live'  ",
    'API_MODE="test"',
    "garbage line",
]


@pytest.fixture
def data():
    return parse_lines(SAMPLE)


def test_line_types(data):
    assert [line.type for line in data.lines] == [
        LineType.COMMENT,
        LineType.VARIABLE,
        LineType.VARIABLE,
        LineType.BLANK,
        LineType.VARIABLE,
        LineType.VARIABLE,
        LineType.COMMENT,
    ]


def test_line_numbers_and_content_preserved(data):
    assert [line.line_number for line in data.lines] == list(range(1, len(SAMPLE) + 1))
    assert [line.original_content for line in data.lines] == SAMPLE


def test_group_order_follows_first_appearance(data):
    assert data.group_order == ["DATABASE_URL", "API_MODE"]


def test_values_are_unquoted(data):
    api = data.variable_groups["API_MODE"]
    assert [line.value for line in api.lines] == ["live", "test"]
    db = data.variable_groups["DATABASE_URL"]
    assert db.lines[0].value == "postgres://localhost/dev"


def test_commented_flags(data):
    flags = [line.is_commented_out for g in data.variable_groups.values() for line in g.lines]
    assert flags == [False, True, True, False]


def test_group_lines_are_the_same_objects(data):
    for group in data.variable_groups.values():
        for line in group.lines:
            assert any(line is other for other in data.lines)
            assert line.key == group.key


def test_initial_active_state(data):
    db = data.variable_groups["DATABASE_URL"]
    assert db.is_active
    assert db.active_line_idx == 0
    assert db.last_active_line_idx == 0
    api = data.variable_groups["API_MODE"]
    assert api.is_active
    assert api.active_line_idx == 1
    assert api.last_active_line_idx == 1


def test_all_commented_group_is_inactive():
    data = parse_lines(["# KEY=a", "#KEY=b"])
    group = data.variable_groups["KEY"]
    assert not group.is_active
    assert group.active_line_idx == -1
    assert group.last_active_line_idx == 0


def test_first_uncommented_wins():
    data = parse_lines(["# KEY=a", "KEY=b", "KEY=c"])
    group = data.variable_groups["KEY"]
    assert group.is_active
    assert group.active_line_idx == 1


@pytest.mark.parametrize("text", ["1KEY=x", "KEY", "export KEY=1", "= value"])
def test_non_variable_lines_are_comments(text):
    data = parse_lines([text])
    assert data.lines[0].type is LineType.COMMENT
    assert data.variable_groups == {}


def test_empty_value():
    data = parse_lines(["EMPTY="])
    line = data.lines[0]
    assert line.type is LineType.VARIABLE
    assert line.value == ""


def test_whitespace_only_is_blank():
    data = parse_lines(["   \t "])
    assert data.lines[0].type is LineType.BLANK


def test_parse_lines_strips_line_endings():
    data = parse_lines(["A=1\r\n", "B=2\n"])
    assert [line.original_content for line in data.lines] == ["A=1", "B=2"]


def test_parse_file_crlf(tmp_path):
    path = tmp_path / ".env"
    path.write_bytes(b"A=1\r\n# B=2\r\n")
    data = parse_file(path)
    assert [line.original_content for line in data.lines] == ["A=1", "# B=2"]
    assert data.group_order == ["A", "B"]


def test_parse_file_without_trailing_newline(tmp_path):
    path = tmp_path / ".env"
    path.write_text("A=1\nB=2")
    data = parse_file(path)
    assert [line.key for line in data.lines] == ["A", "B"]


def test_parse_empty_file(tmp_path):
    path = tmp_path / ".env"
    path.write_text("")
    data = parse_file(path)
    assert data.lines == []
    assert data.group_order == []


def test_parse_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_file(tmp_path / "missing.env")


def test_debug_dump(data):
    dump = data.debug_dump()
    assert "L1 [Comment]: # Database settings" in dump
    assert "(Key: DATABASE_URL, Val: postgres://localhost/dev, Commented: false)" in dump
    assert "--- Variable Groups (Order: [DATABASE_URL API_MODE] ) ---" in dump
    assert "  * [0] L2: DATABASE_URL=postgres://localhost/dev" in dump