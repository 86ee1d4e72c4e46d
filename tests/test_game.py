import pytest

from cubraycaster.game import Game, Key, load_game, main
from cubraycaster.mapfile import MapError, parse_color
from cubraycaster.player import Keys, find_player

ROOM = (
    "1111111",
    "1000001",
    "1000001",
    "100N001",
    "1000001",
    "1000001",
    "1111111",
)

WALL_COLORS = (0x111111, 0x222222, 0x333333, 0x444444)
FLOOR = 0x0000AA
CEILING = 0x00AA00


class SolidTexture:
    def __init__(self, color):
        self.color = color

    def pixel(self, x, y):
        return self.color


def make_game():
    return Game(
        grid=ROOM,
        player=find_player(ROOM),
        textures=[SolidTexture(c) for c in WALL_COLORS],
        floor=FLOOR,
        ceiling=CEILING,
    )


def write_xpm(path):
    lines = ['"64 64 1 1",', '"a c #FF0000",']
    lines += ['"' + "a" * 64 + '",'] * 64
    path.write_text("static char *tex[] = {\n" + "\n".join(lines) + "\n};\n")


def write_scene(tmp_path, keys=("NO", "SO", "WE", "EA")):
    texture = tmp_path / "wall.xpm"
    write_xpm(texture)
    header = "".join(f"{key} {texture}\n" for key in keys)
    text = header + "F 10,20,30\nC 40,50,60\n\n" + "\n".join(ROOM) + "\n"
    scene = tmp_path / "room.cub"
    scene.write_text(text)
    return scene


def test_key_down_and_up_toggle_held_keys():
    game = make_game()
    game.key_down(Key.W)
    game.key_down(Key.LEFT)
    assert game.keys.w and game.keys.left
    game.key_up(Key.W)
    assert not game.keys.w
    assert game.keys.left


@pytest.mark.parametrize("key, flag", [(13, "w"), (0, "a"), (1, "s"), (2, "d"), (123, "left"), (124, "right")])
def test_raw_key_codes_map_to_flags(key, flag):
    game = make_game()
    game.key_down(key)
    assert getattr(game.keys, flag) is True
    game.key_up(key)
    assert getattr(game.keys, flag) is False


def test_unknown_key_is_ignored():
    game = make_game()
    game.key_down(99)
    assert game.keys == Keys()
    assert game.running is True


@pytest.mark.parametrize("press", ["key_down", "key_up"])
def test_escape_ends_game(press):
    game = make_game()
    getattr(game, press)(Key.ESC)
    assert game.running is False


def test_tick_without_keys_does_nothing():
    game = make_game()
    before = (game.player.x, game.player.y, game.player.dir_x, game.player.dir_y)
    assert game.tick() is False
    assert (game.player.x, game.player.y, game.player.dir_x, game.player.dir_y) == before
    assert game.frame.get(640, 0) == 0


def test_tick_turning_redraws_frame():
    game = make_game()
    game.key_down(Key.RIGHT)
    old_dir_x = game.player.dir_x
    assert game.tick() is True
    assert game.player.dir_x != old_dir_x
    assert game.frame.get(640, 0) == CEILING
    assert game.frame.get(640, 719) == FLOOR
    assert game.frame.get(640, 360) in WALL_COLORS


def test_load_game_reads_scene_and_draws(tmp_path):
    game = load_game(write_scene(tmp_path))
    assert game.floor == parse_color("F 10,20,30\n")
    assert game.ceiling == parse_color("C 40,50,60\n")
    assert (game.player.x, game.player.y) == (3.5, 3.5)
    assert game.frame.get(640, 360) == 0xFF0000
    assert game.frame.get(640, 0) == game.ceiling
    assert game.frame.get(640, 719) == game.floor


def test_load_game_missing_texture(tmp_path):
    with pytest.raises(MapError):
        load_game(write_scene(tmp_path, keys=("NO", "SO", "WE")))


def test_load_game_wrong_extension(tmp_path):
    path = tmp_path / "room.txt"
    path.write_text("")
    with pytest.raises(MapError):
        load_game(path)


def test_main_requires_single_argument(capsys):
    assert main([]) == 1
    assert "please run with single map" in capsys.readouterr().out


def test_main_reports_load_error(tmp_path, capsys):
    assert main([str(tmp_path / "map.txt")]) == 1
    assert "Wrong file format" in capsys.readouterr().out