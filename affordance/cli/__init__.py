"""Affordance CLI - generate and inspect collection configs."""

__version__ = "0.1.0"
