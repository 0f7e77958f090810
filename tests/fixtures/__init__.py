"""Shared pytest fixtures for service, API and integration tests."""

from .auth import *  # noqa: F401,F403
from .core import *  # noqa: F401,F403
from .domain import *  # noqa: F401,F403
