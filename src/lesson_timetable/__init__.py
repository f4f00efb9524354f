"""Weekly tennis lesson timetable scheduler."""

__version__ = "0.1.0"
