"""
Engines: program execution (RestrictedPython), binding registry, session result channel.
"""

from .program import ProgramScope, SandboxExecutor, ScriptTimeoutError, run
from .registry import BindingRegistry, BindingRegistryError, default_registry

__all__ = [
    "BindingRegistry",
    "BindingRegistryError",
    "ProgramScope",
    "SandboxExecutor",
    "ScriptTimeoutError",
    "default_registry",
    "run",
]
