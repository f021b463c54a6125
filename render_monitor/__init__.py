"""Live terminal monitor for Blender batch animation renders."""

__version__ = "0.1.0"
