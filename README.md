# cubraycaster

A small first-person raycaster. It reads a `.cub` scene file and shows a
textured maze in a 1280×720 window. The scene file names four XPM wall
textures, a floor colour, a ceiling colour and a map drawn in characters.

## Installing

```
pip install .
```

This installs the `cubraycaster` command and its one runtime dependency,
pygame.

## Running

```
cubraycaster maps/example.cub
```

The command takes exactly one argument, the path of a scene file ending in
`.cub`. With any other number of arguments it prints a usage line and exits
with status 1. If the scene or one of its textures cannot be loaded, it
prints the error and exits with status 1.

### Controls

| Key          | Action              |
|--------------|---------------------|
| W / S        | move forward / back |
| A / D        | strafe left / right |
| Left / Right | turn                |
| Esc          | quit                |

Closing the window also quits. A step is refused when the cell a short
distance ahead is a wall or lies off the map.

## Scene files

The texture and colour lines come first, in any order. Blank lines may come
between them. After them come an optional run of blank lines and then the
map:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0

        1111111111111
        1000000000001
111111111011000001101
100000000000000000001
1111011111110000000N1
    1111111111111111
```

- `NO`, `SO`, `WE`, `EA` name the XPM texture for each wall face. The path
  is the rest of the line after the key and one space; relative paths are
  taken from the current directory. All four must be given. The renderer
  samples textures as 64×64 images, so each texture must be at least that
  large.
- `F` and `C` set the floor and ceiling colours as `R,G,B`. Reading of the
  header stops as soon as both are set, so texture lines must come before
  the later of the two colour lines.
- In the map, `1` is a wall, `0` is open floor and a space is outside the
  map. Exactly one of `N`, `S`, `E`, `W` marks the player's start cell and
  the direction the player faces. Any other character is an error.
- The map may contain no blank lines. Every open cell and the player must be
  closed in by walls, both along rows and down columns. Shorter rows are
  padded with spaces.

## What it does not do

The game draws walls, a flat floor and a flat ceiling, and nothing else.
There is no minimap, no mouse look, no sprites or doors, no sound and no
score. Textures are read from XPM files only. The window is only redrawn
while a movement or turning key is held.

## Using it as a library

The modules can be used on their own:

- `cubraycaster.mapfile` parses and validates scenes: `read_scene(path)`,
  `parse_scene(text)`, `check_map(rows)`, `pad_map(rows, width)`,
  `parse_color(line)` and `has_cub_extension(path)`. A parsed `Scene` has
  `textures` (keyed `NO`, `SO`, `WE`, `EA`), `floor`, `ceiling`, `grid`,
  `width` and `height`. Errors are raised as `MapError`.
- `cubraycaster.xpm` reads XPM images: `load_xpm(path)`,
  `parse_xpm(text)`, `parse_xpm_lines(lines)`, with the helpers
  `strip_comments(text)` and `quoted_strings(text)`. They return an
  `XpmImage` whose `pixel(x, y)` gives a 32-bit colour value; the colour
  `None` becomes `0xFF000000`. Errors are raised as `XpmError`.
- `cubraycaster.colornames.color_value(name, extra)` turns an XPM colour
  specification (`#rrggbb` or an X11 colour name) into an RGB value; `none`
  gives -1 and an unknown name gives 0.
- `cubraycaster.player` holds the `Player` with its `turn(left)` and
  `step(grid, dx, dy, sign)` movement, the `Keys` state with `active()`,
  `find_player(grid)` and `apply_movement(player, keys, grid)`.
- `cubraycaster.raycast` casts rays and draws frames: `cast_ray(grid,
  player, x)` returns a `Hit`, `draw_column` draws one screen column and
  `render` draws a whole frame into a `Frame`, whose `put(x, y, color)` and
  `get(x, y)` write and read pixels.
- `cubraycaster.game` ties them together: `load_game(path)` returns a
  `Game` with its first frame drawn, whose `key_down(key)`, `key_up(key)`
  and `tick()` take the key codes in `Key`. `main(argv)` is the command.

```python
from cubraycaster.game import Key, load_game

game = load_game("maps/example.cub")
game.key_down(Key.W)
moved = game.tick()          # True; the frame is redrawn
colour = game.frame.get(640, 360)
```

## Running the tests

```
pip install .[test]
pytest
```