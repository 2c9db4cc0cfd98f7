"""forkpatch — keep a fork's local customizations as patches over upstream."""

__version__ = "0.1.0"
