"""Shared library code for SkillRouter.

Usage:
    from skillrouter.lib.errors import EnumCoreErrorCode, SkillRouterError
"""

from skillrouter.lib import errors

__all__ = [
    "errors",
]
