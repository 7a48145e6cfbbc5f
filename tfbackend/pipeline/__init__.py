"""
Pipeline integration for tfbackend.
"""

from .workflow import WorkflowContext

__all__ = ["WorkflowContext"]
