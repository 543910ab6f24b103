"""Sun and shadow simulation for garden layouts."""

__version__ = "0.1.0"
