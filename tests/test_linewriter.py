from dockcompose.linewriter import LineWriter, get_writer


def test_split_writer():
    lines = []
    w = get_writer(lines.append)
    for chunk in [b"h", b"e", b"l", b"l", b"o", b"\n", b"world!\n"]:
        w.write(chunk)
    assert lines == ["hello", "world!"]


def test_write_returns_length():
    w = get_writer(lambda line: None)
    assert w.write(b"abc\nde") == 6


def test_multiple_lines_in_one_chunk():
    lines = []
    w = LineWriter(lines.append)
    w.write(b"one\ntwo\nthree")
    assert lines == ["one", "two"]
    w.close()
    assert lines == ["one", "two", "three"]


def test_close_with_empty_buffer_emits_nothing():
    lines = []
    w = LineWriter(lines.append)
    w.write(b"done\n")
    w.close()
    assert lines == ["done"]


def test_accepts_str_and_context_manager():
    lines = []
    with get_writer(lines.append) as w:
        w.write("a\nb")
    assert lines == ["a", "b"]


def test_empty_lines_are_kept():
    lines = []
    w = get_writer(lines.append)
    w.write(b"\n\nx\n")
    assert lines == ["", "", "x"]