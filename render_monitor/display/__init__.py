"""Live dashboard: statistics state, formatting, and terminal drawing."""
