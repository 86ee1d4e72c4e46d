"""A grid-based first-person raycaster for .cub scene files with XPM textures."""

__version__ = "0.1.0"
__all__ = ["colornames", "xpm", "mapfile", "player", "raycast", "game"]