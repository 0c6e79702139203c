"""Method-call interception with composable middleware.

This module exposes the composition root, the per-call context and the
building blocks needed to wrap any service interface in a middleware
chain that works the same way for plain and coroutine methods.
"""

from importlib.metadata import version as get_version

from chainify._internal.common.constants import EMPTY, ReturnShape, RunMode
from chainify._internal.context import InvocationContext
from chainify._internal.inspection import MethodSpec, describe_interface
from chainify._internal.interceptor import (
    Interceptor,
    create_interceptor,
    create_proxy,
    get_interceptor,
)
from chainify.chainify import Chainify

__version__ = get_version("chainify")
__all__ = (
    "EMPTY",
    "Chainify",
    "Interceptor",
    "InvocationContext",
    "MethodSpec",
    "ReturnShape",
    "RunMode",
    "create_interceptor",
    "create_proxy",
    "describe_interface",
    "get_interceptor",
)
