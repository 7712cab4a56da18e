"""Kernel services - Subprocess kernel session and code execution."""
from .session import KernelSession, KernelFuture, KernelDiedError
from .execution import execute_code

__all__ = ['KernelSession', 'KernelFuture', 'KernelDiedError', 'execute_code']
