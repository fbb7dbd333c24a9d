"""breath-guard — safety and recommendation engine for guided breathing."""

__version__ = "0.1.0"
