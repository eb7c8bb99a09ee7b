"""System functionality: base class, decorator, and handles."""

from slotecs.core.system.core import FunctionSystem, PerEntityFunctionSystem, system
from slotecs.core.system.models import System, SystemHandle

__all__ = [
    # Models
    "System",
    "SystemHandle",
    # Core
    "system",
    "FunctionSystem",
    "PerEntityFunctionSystem",
]
