import pytest

from cubraycaster.player import FOV, Player
from cubraycaster.raycast import (
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TEXTURE_SIZE,
    Frame,
    cast_ray,
    draw_column,
    render,
)
from cubraycaster.xpm import XpmImage

CENTER = SCREEN_WIDTH // 2

ROOM = (
    "11111",
    "10001",
    "10001",
    "10001",
    "11111",
)

CORRIDOR = (
    "111",
    "101",
    "101",
    "101",
    "101",
    "111",
)


def _solid(color):
    return XpmImage(TEXTURE_SIZE, TEXTURE_SIZE, (color,) * (TEXTURE_SIZE * TEXTURE_SIZE))


def _rows_texture():
    return XpmImage(
        TEXTURE_SIZE,
        TEXTURE_SIZE,
        tuple(y for y in range(TEXTURE_SIZE) for _ in range(TEXTURE_SIZE)),
    )


def _columns_texture():
    return XpmImage(
        TEXTURE_SIZE,
        TEXTURE_SIZE,
        tuple(x for _ in range(TEXTURE_SIZE) for x in range(TEXTURE_SIZE)),
    )


def _facing(name, x=2.5, y=2.5):
    facings = {
        "N": (0.0, -1.0, FOV, 0.0),
        "S": (0.0, 1.0, -FOV, 0.0),
        "W": (-1.0, 0.0, 0.0, -FOV),
        "E": (1.0, 0.0, 0.0, FOV),
    }
    return Player(x, y, *facings[name])


def test_frame_put_and_get_round_trip():
    frame = Frame()
    frame.put(10, 20, 0x123456)
    assert frame.get(10, 20) == 0x123456
    assert frame.get(11, 20) == 0


def test_frame_masks_negative_colour():
    frame = Frame()
    frame.put(0, 0, -1)
    assert frame.get(0, 0) == 0xFFFFFFFF


def test_frame_ignores_points_outside():
    frame = Frame(4, 3)
    for x, y in [(-1, 0), (0, -1), (4, 0), (0, 3)]:
        frame.put(x, y, 7)
    assert sum(frame.pixels) == 0


def test_frame_get_outside_raises():
    frame = Frame(4, 3)
    with pytest.raises(IndexError):
        frame.get(4, 0)


def test_frame_rejects_empty_size():
    with pytest.raises(ValueError):
        Frame(0, 10)


def test_center_ray_north_hits_top_wall():
    player = _facing("N")
    hit = cast_ray(ROOM, player, CENTER)
    assert hit.found is True
    assert (hit.map_x, hit.map_y) == (2, 0)
    assert hit.distance == pytest.approx(player.y - 1.0)


@pytest.mark.parametrize(
    "name, side, wall",
    [("N", 1, 1), ("S", 1, 0), ("W", 0, 3), ("E", 0, 2)],
)
def test_wall_side_and_texture_index(name, side, wall):
    hit = cast_ray(ROOM, _facing(name), CENTER)
    assert hit.side == side
    assert hit.wall == wall


def test_nearer_wall_draws_taller_line():
    near = cast_ray(CORRIDOR, _facing("N", 1.5, 2.5), CENTER)
    far = cast_ray(CORRIDOR, _facing("N", 1.5, 4.5), CENTER)
    assert near.distance < far.distance
    assert near.line_height > far.line_height


def test_short_line_is_centered():
    hit = cast_ray(CORRIDOR, _facing("N", 1.5, 4.5), CENTER)
    assert 0 < hit.draw_start <= SCREEN_HEIGHT // 2 <= hit.draw_end < SCREEN_HEIGHT
    assert hit.draw_start + hit.draw_end == SCREEN_HEIGHT - (hit.line_height % 2) * 0


def test_tall_line_is_clamped_to_screen():
    grid = ("111", "101", "111")
    hit = cast_ray(grid, _facing("N", 1.5, 1.5), CENTER)
    assert hit.line_height > SCREEN_HEIGHT
    assert hit.draw_start == 0
    assert hit.draw_end == SCREEN_HEIGHT


def test_ray_leaving_open_grid_finds_nothing():
    grid = ("000", "000", "000")
    hit = cast_ray(grid, _facing("N", 1.5, 1.5), CENTER)
    assert hit.found is False
    assert hit.map_y < 0


def test_edge_columns_spread_symmetrically():
    player = _facing("N")
    left = cast_ray(ROOM, player, 0)
    right = cast_ray(ROOM, player, SCREEN_WIDTH - 1)
    assert left.ray_dir_x < 0 < right.ray_dir_x
    assert left.ray_dir_y == right.ray_dir_y == player.dir_y


def test_draw_column_fills_ceiling_wall_and_floor():
    frame = Frame()
    hit = cast_ray(CORRIDOR, _facing("N", 1.5, 4.5), CENTER)
    wall_color = 0x00AA00
    textures = [_solid(wall_color)] * 4
    draw_column(frame, CENTER, hit, textures, 0x111111, 0x222222)
    column = [frame.get(CENTER, y) for y in range(SCREEN_HEIGHT)]
    assert set(column[: hit.draw_start]) == {0x222222}
    assert set(column[hit.draw_start : hit.draw_end]) == {wall_color}
    assert set(column[hit.draw_end :]) == {0x111111}
    assert frame.get(CENTER + 1, 0) == 0


def test_draw_column_uses_texture_of_hit_wall():
    frame = Frame()
    hit = cast_ray(ROOM, _facing("E"), CENTER)
    textures = [_solid(index + 1) for index in range(4)]
    draw_column(frame, CENTER, hit, textures, 0, 0)
    assert frame.get(CENTER, SCREEN_HEIGHT // 2) == hit.wall + 1


def test_texture_rows_advance_down_the_wall():
    frame = Frame()
    hit = cast_ray(CORRIDOR, _facing("N", 1.5, 4.5), CENTER)
    draw_column(frame, CENTER, hit, [_rows_texture()] * 4, 0, 0)
    rows = [frame.get(CENTER, y) for y in range(hit.draw_start, hit.draw_end)]
    assert rows == sorted(rows)
    assert all(0 <= value < TEXTURE_SIZE for value in rows)
    assert rows[0] < rows[-1]


def test_texture_column_is_constant_over_slice():
    frame = Frame()
    hit = cast_ray(CORRIDOR, _facing("N", 1.5, 4.5), CENTER)
    draw_column(frame, CENTER, hit, [_columns_texture()] * 4, 0, 0)
    values = {frame.get(CENTER, y) for y in range(hit.draw_start, hit.draw_end)}
    assert len(values) == 1
    assert 0 <= values.pop() < TEXTURE_SIZE


def test_draw_column_masks_negative_floor():
    frame = Frame()
    hit = cast_ray(CORRIDOR, _facing("N", 1.5, 4.5), CENTER)
    draw_column(frame, CENTER, hit, [_solid(5)] * 4, -1, 0)
    assert frame.get(CENTER, SCREEN_HEIGHT - 1) == 0xFFFFFFFF


def test_render_draws_every_column():
    frame = Frame()
    textures = [_solid(0x100 + index) for index in range(4)]
    hits = render(frame, ROOM, _facing("N"), textures, 0x0000FF, 0xFF0000)
    assert len(hits) == SCREEN_WIDTH
    assert all(hit.found for hit in hits)
    assert {frame.get(x, 0) for x in range(SCREEN_WIDTH)} == {0xFF0000}
    assert {frame.get(x, SCREEN_HEIGHT - 1) for x in range(SCREEN_WIDTH)} == {0x0000FF}
    middle = hits[CENTER]
    assert frame.get(CENTER, SCREEN_HEIGHT // 2) == 0x100 + middle.wall