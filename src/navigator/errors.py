#!/usr/bin/env python3
"""
Navigator errors

- ConfigurationError: knowledge base or settings are inconsistent (fatal at load)
- InvalidProfileError: profile is structurally unusable (no immigration goal)

"No path found" is NOT an error - the engine returns None for it.
"""


class NavigatorError(Exception):
    """Base exception for the navigator engine."""
    pass


class ConfigurationError(NavigatorError):
    """Knowledge base or configuration is internally inconsistent."""
    pass


class InvalidProfileError(NavigatorError):
    """Profile is missing mandatory input."""
    pass
