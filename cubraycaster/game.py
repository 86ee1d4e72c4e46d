"""Game state, keyboard handling and the windowed main loop."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Sequence

from .mapfile import TEXTURE_KEYS, MapError, read_scene
from .player import Keys, Player, apply_movement, find_player
from .raycast import SCREEN_HEIGHT, SCREEN_WIDTH, Frame, render
from .xpm import XpmError, XpmImage, load_xpm

__all__ = ["Key", "Game", "load_game", "main"]

USAGE = "error: please run with single map: cubraycaster eg.cub"
WINDOW_TITLE = "cub3d"


class Key(IntEnum):
    """Key codes the game reacts to."""

    ESC = 53
    W = 13
    A = 0
    S = 1
    D = 2
    LEFT = 123
    RIGHT = 124


# Which held-key flag each movement key controls.
_KEY_FLAGS = {
    Key.W: "w",
    Key.S: "s",
    Key.A: "a",
    Key.D: "d",
    Key.LEFT: "left",
    Key.RIGHT: "right",
}


def _as_key(key: int) -> Key | None:
    try:
        return Key(key)
    except ValueError:
        return None


@dataclass
class Game:
    """A running scene: map grid, player, textures, held keys and frame."""

    grid: tuple[str, ...]
    player: Player
    textures: Sequence[XpmImage]
    floor: int
    ceiling: int
    keys: Keys = field(default_factory=Keys)
    frame: Frame = field(default_factory=Frame)
    running: bool = True

    def _set_key(self, key: int, held: bool) -> None:
        code = _as_key(key)
        if code is None:
            return
        if code is Key.ESC:
            self.running = False
            return
        setattr(self.keys, _KEY_FLAGS[code], held)

    def key_down(self, key: int) -> None:
        """Mark ``key`` as held; Escape ends the game."""
        self._set_key(key, True)

    def key_up(self, key: int) -> None:
        """Mark ``key`` as released; Escape ends the game."""
        self._set_key(key, False)

    def _redraw(self) -> None:
        render(self.frame, self.grid, self.player, self.textures, self.floor, self.ceiling)

    def tick(self) -> bool:
        """Advance one frame; redraw and return True when the player moved or turned."""
        moved = apply_movement(self.player, self.keys, self.grid)
        if moved:
            self._redraw()
        return moved


def load_game(path: str | Path) -> Game:
    """Load a ``.cub`` scene with its textures and draw the first frame."""
    scene = read_scene(path)
    missing = [key for key in TEXTURE_KEYS if key not in scene.textures]
    if missing:
        raise MapError(f"missing texture: {missing[0]}")
    textures = []
    for key in TEXTURE_KEYS:
        texture_path = scene.textures[key]
        try:
            textures.append(load_xpm(texture_path))
        except XpmError as exc:
            raise XpmError(f"File Not Found :{texture_path}") from exc
    player = find_player(scene.grid)
    game = Game(
        grid=scene.grid,
        player=player,
        textures=textures,
        floor=scene.floor,
        ceiling=scene.ceiling,
    )
    game._redraw()
    return game


def _run_window(game: Game) -> None:
    import pygame

    key_map = {
        pygame.K_ESCAPE: Key.ESC,
        pygame.K_w: Key.W,
        pygame.K_a: Key.A,
        pygame.K_s: Key.S,
        pygame.K_d: Key.D,
        pygame.K_LEFT: Key.LEFT,
        pygame.K_RIGHT: Key.RIGHT,
    }
    pygame.init()
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(WINDOW_TITLE)
        surface = pygame.Surface(
            (game.frame.width, game.frame.height), 0, 32, (0xFF0000, 0xFF00, 0xFF, 0)
        )
        clock = pygame.time.Clock()

        def show() -> None:
            surface.get_buffer().write(game.frame.pixels.tobytes())
            screen.blit(surface, (0, 0))
            pygame.display.flip()

        show()
        while game.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.running = False
                elif event.type == pygame.KEYDOWN and event.key in key_map:
                    game.key_down(key_map[event.key])
                elif event.type == pygame.KEYUP and event.key in key_map:
                    game.key_up(key_map[event.key])
            if not game.running:
                break
            if game.tick():
                show()
            clock.tick(60)
    finally:
        pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Start the game on the single scene file named in ``argv``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(USAGE)
        return 1
    try:
        game = load_game(args[0])
    except (MapError, XpmError) as exc:
        print(exc)
        return 1
    _run_window(game)
    return 0