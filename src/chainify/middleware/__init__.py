"""Middleware contract and pipeline building blocks."""

from chainify._internal.common.types import CallNext, TerminalStep
from chainify._internal.middleware.base import BaseMiddleware, build_middleware
from chainify._internal.middleware.pipeline import Chain, MiddlewarePipeline
from chainify._internal.runners import TargetInvoker

__all__ = (
    "BaseMiddleware",
    "CallNext",
    "Chain",
    "MiddlewarePipeline",
    "TargetInvoker",
    "TerminalStep",
    "build_middleware",
)
