"""Shared pytest fixtures and helpers for order service tests."""

from .core import *  # noqa: F401,F403
