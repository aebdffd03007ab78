"""Test configuration and fixtures for the order service."""

from tests.fixtures import *  # noqa: F401,F403
