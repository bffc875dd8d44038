"""
signalbook: a small signal/matrix DSL for notebook cells.

Layers:
- core: Signal, Matrix, result envelope and error classification
- dsp: numpy kernels behind Signal operations
- lang: the Workspace evaluator
"""

from .config import WorkspaceConfig, load_workspace_config
from .core import (
    Signal,
    Matrix,
    ComputationResult,
    ComputationError,
    ErrorKind,
)
from .lang import Workspace


__all__ = [
    "Workspace",
    "WorkspaceConfig",
    "load_workspace_config",
    "Signal",
    "Matrix",
    "ComputationResult",
    "ComputationError",
    "ErrorKind",
]

__version__ = "0.1.0"
