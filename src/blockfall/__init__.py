"""blockfall: a falling-block puzzle game built around a pure state reducer."""

__version__ = "0.1.0"
