"""A brick-breaker arcade game with a software renderer, WAV loader and audio mixer."""

__version__ = "0.1.0"