import pytest

from cubraycaster.mapfile import (
    MapError,
    check_map,
    has_cub_extension,
    pad_map,
    parse_color,
    parse_scene,
    read_scene,
)

HEADER = (
    "NO ./north.xpm\n"
    "SO ./south.xpm\n"
    "WE ./west.xpm\n"
    "EA ./east.xpm\n"
    "\n"
    "F 220,100,0\n"
    "C 225,30,0\n"
)
MAP = "1111\n1N01\n1111\n"
SCENE = HEADER + "\n" + MAP


@pytest.mark.parametrize(
    "name, expected",
    [
        ("map.cub", True),
        ("a.cub", True),
        ("maps/level.cub", True),
        (".cub", False),
        ("map.cub.txt", False),
        ("mapcub", False),
    ],
)
def test_has_cub_extension(name, expected):
    assert has_cub_extension(name) is expected


def test_parse_color_packs_rgb():
    assert parse_color("F 220,100,0\n") == 0xDC6400


def test_parse_color_white_and_black():
    assert parse_color("C 255,255,255") == 0xFFFFFF
    assert parse_color("C 0,0,0") == 0


def test_parse_color_skips_empty_components():
    assert parse_color("F 1,,2,3") == parse_color("F 1,2,3")


def test_parse_color_missing_component():
    with pytest.raises(MapError):
        parse_color("F 1,2")


def test_pad_map_fills_with_spaces():
    assert pad_map(["1", "111"], 3) == ["1  ", "111"]


def test_pad_map_keeps_longer_rows():
    assert pad_map(["11111", "11"], 3) == ["11111", "11 "]


def test_pad_map_rejects_unknown_character():
    with pytest.raises(MapError):
        pad_map(["111", "1X1", "111"], 3)


def test_check_map_closed():
    assert check_map(["1111", "1N01", "1111"]) is True


@pytest.mark.parametrize(
    "rows",
    [
        ["0111"],
        ["1111", "10 1", "1111"],
        ["111", "101", "101"],
        ["111", "1N1", " 0 "],
    ],
)
def test_check_map_open(rows):
    assert check_map(rows) is False


def test_parse_scene_textures_and_colours():
    scene = parse_scene(SCENE)
    assert scene.textures == {
        "NO": "./north.xpm",
        "SO": "./south.xpm",
        "WE": "./west.xpm",
        "EA": "./east.xpm",
    }
    assert scene.floor == parse_color("F 220,100,0")
    assert scene.ceiling == parse_color("C 225,30,0")


def test_parse_scene_grid():
    scene = parse_scene(SCENE)
    assert scene.grid == ("1111", "1N01", "1111")
    assert scene.height == 3
    assert scene.width == 4


def test_parse_scene_pads_short_rows():
    scene = parse_scene(HEADER + "1111\n1N01\n111\n")
    assert scene.grid[2] == "111 "
    assert all(len(row) == 4 for row in scene.grid)


def test_parse_scene_skips_blank_lines_before_map():
    assert parse_scene(HEADER + "\n\n\n" + MAP).grid == parse_scene(SCENE).grid


def test_parse_scene_ignores_unknown_header_lines():
    text = "S ./sprite.xpm\n" + SCENE
    assert parse_scene(text).grid == parse_scene(SCENE).grid


def test_parse_scene_blank_line_inside_map():
    with pytest.raises(MapError):
        parse_scene(HEADER + "1111\n1N01\n\n1111\n")


def test_parse_scene_missing_ceiling():
    text = "NO ./north.xpm\nF 1,2,3\n" + MAP
    with pytest.raises(MapError):
        parse_scene(text)


def test_parse_scene_no_map():
    with pytest.raises(MapError):
        parse_scene(HEADER + "\n\n")


def test_parse_scene_unsupported_character():
    with pytest.raises(MapError):
        parse_scene(HEADER + "1111\n1N21\n1111\n")


def test_parse_scene_open_map():
    with pytest.raises(MapError):
        parse_scene(HEADER + "1111\n1N00\n1111\n")


def test_parse_scene_header_after_colours_is_map_text():
    with pytest.raises(MapError):
        parse_scene(HEADER + "EA ./late.xpm\n" + MAP)


def test_read_scene_matches_parse(tmp_path):
    path = tmp_path / "level.cub"
    path.write_text(SCENE)
    assert read_scene(path) == parse_scene(SCENE)


def test_read_scene_wrong_extension(tmp_path):
    path = tmp_path / "level.txt"
    path.write_text(SCENE)
    with pytest.raises(MapError):
        read_scene(path)


def test_read_scene_missing_file(tmp_path):
    with pytest.raises(MapError):
        read_scene(tmp_path / "absent.cub")