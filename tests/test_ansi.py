from version_tracker.utils.ansi import strip_ansi


def test_strip_color_codes():
    assert strip_ansi("\u001b[31mhello\u001b[0m") == "hello"


def test_strip_c1_introducer_and_parameters():
    assert strip_ansi("\x9b1;32mv1.2.3\x9b0m") == "v1.2.3"
    assert strip_ansi("\x1b[38;5;208mnode\x1b[39m v20") == "node v20"


def test_strip_cursor_and_erase_sequences():
    assert strip_ansi("\x1b[2K\x1b[1Gnpm 10.2.4") == "npm 10.2.4"
    assert strip_ansi("\x1b[?25lspinner\x1b[?25h") == "spinner"


def test_plain_text_untouched():
    text = "git version 2.34.1 [extra] (x86_64)"
    assert strip_ansi(text) == text


def test_only_escapes_leaves_empty():
    assert strip_ansi("\x1b[0m\x1b[1m").strip() == ""
