"""Shared pytest fixtures."""

from .core import *  # noqa: F401,F403
from .webhooks import *  # noqa: F401,F403
