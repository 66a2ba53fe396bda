"""Grid raycasting game: .cub scene parsing, XPM textures, ray casting and a pygame window."""

__version__ = "0.1.0"