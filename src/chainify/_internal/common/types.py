import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeAlias

from chainify._internal.context import InvocationContext

if TYPE_CHECKING:
    from chainify._internal.middleware.pipeline import MiddlewarePipeline

CallNext: TypeAlias = Callable[[InvocationContext], Awaitable[None]]
TerminalStep: TypeAlias = CallNext
LoopFactory: TypeAlias = Callable[[], asyncio.AbstractEventLoop]
Configure: TypeAlias = Callable[["MiddlewarePipeline"], None]
