"""taskquill - prompt composition for task-tracking tool responses."""

__version__ = "0.1.0"
