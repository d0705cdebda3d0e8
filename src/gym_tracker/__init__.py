"""gym-tracker: local workout tracking for gym trainers."""

__version__ = "1.1.0"
