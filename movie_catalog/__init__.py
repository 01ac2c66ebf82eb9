"""Movie catalog web API: movies, comments, and yearly favourites lists."""

__version__ = "0.1.0"
