import pytest

from cubraycaster.colornames import color_value


@pytest.mark.parametrize(
    "name, expected",
    [
        ("snow", 0xFFFAFA),
        ("red", 0xFF0000),
        ("navy", 0x80),
        ("gray50", 0x7F7F7F),
        ("lightgreen", 0x90EE90),
    ],
)
def test_named_colors(name, expected):
    assert color_value(name) == expected


def test_lookup_is_case_insensitive():
    assert color_value("RED") == color_value("red")
    assert color_value("GhostWhite") == color_value("ghostwhite")


def test_two_word_name_joined_with_extra():
    assert color_value("light", "blue") == 0xADD8E6
    assert color_value("light", "blue") == color_value("lightblue")


def test_first_duplicate_entry_wins():
    assert color_value("dark slate") == 0x2F4F4F


def test_none_is_transparent_marker():
    assert color_value("none") == -1
    assert color_value("None") == -1


def test_unknown_name_gives_zero():
    assert color_value("no-such-colour") == 0
    assert color_value("red", "wine") == 0


def test_hex_specification():
    assert color_value("#ff0000") == color_value("red")
    assert color_value("#FFFAFA") == color_value("snow")


def test_hex_reads_only_leading_digits():
    assert color_value("#12zz") == 0x12
    assert color_value("#zz") == 0


def test_hex_ignores_extra():
    assert color_value("#ff", "blue") == 0xFF


def test_gray_and_grey_spellings_agree():
    for level in (0, 25, 50, 75, 100):
        assert color_value(f"gray{level}") == color_value(f"grey{level}")