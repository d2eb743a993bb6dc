"""SongScout — find songs from a short recorded or uploaded audio clip."""

__version__ = "0.1.0"
