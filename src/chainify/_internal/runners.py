from __future__ import annotations

import asyncio
import contextvars
import functools
import inspect
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, final

from chainify._internal.common.constants import RunMode
from chainify._internal.configuration import ChainifyConfiguration
from chainify._internal.typeadapter.dummy import DummyLoader

if TYPE_CHECKING:
    from collections.abc import Callable

    from chainify._internal.common.types import CallNext
    from chainify._internal.context import InvocationContext

logger = logging.getLogger("chainify.interceptor")


@final
class TargetInvoker:
    """Terminal step: call the real method and record its outcome.

    Failures never leave this step as raised exceptions, they are stored
    on the context so outer middleware can observe or replace them.
    """

    __slots__: tuple[str, ...] = ("config",)

    def __init__(self, config: ChainifyConfiguration | None = None) -> None:
        self.config: ChainifyConfiguration = config or ChainifyConfiguration(
            loader=DummyLoader(),
        )

    def offloads(
        self,
        func: Callable[..., Any],
        *,
        is_async_shape: bool,
    ) -> bool:
        """Whether a call to *func* is moved to the thread pool.

        Only plain functions behind awaitable-shaped methods qualify, a
        value-shaped caller is blocked anyway.
        """
        return (
            is_async_shape
            and self.config.run_mode is RunMode.THREAD
            and not inspect.iscoroutinefunction(func)
        )

    async def call_target(
        self,
        func: Callable[..., Any],
        context: InvocationContext,
    ) -> Any:  # noqa: ANN401
        is_async_shape = context.method.shape.is_async
        args, kwargs = context.arguments.args, context.arguments.kwargs

        if self.offloads(func, is_async_shape=is_async_shape):
            call = functools.partial(func, *args, **kwargs)
            loop = self.config.getloop()
            result = await loop.run_in_executor(self.config.threadpool, call)
        else:
            result = func(*args, **kwargs)

        # Covers coroutine functions and sync methods handing back awaitables.
        if inspect.isawaitable(result) and (
            is_async_shape or inspect.iscoroutine(result)
        ):
            result = await result
        return result

    async def __call__(self, context: InvocationContext) -> None:
        method = context.method
        try:
            func = getattr(context.target, method.name)
            result = await self.call_target(func, context)
        except Exception as exc:
            context.exception = exc
            return

        context.exception = None
        context.result = None if method.returns_none else result


def run_until_settled(chain: CallNext, context: InvocationContext) -> None:
    """Drive *chain* to completion and block the calling thread.

    If the calling thread already runs an event loop, the chain runs on a
    helper thread with a fresh loop. Middleware that waits on the blocked
    loop will deadlock.
    """

    async def drive() -> None:
        await chain(context)

    try:
        _ = asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(drive())
        return

    logger.debug(
        "Event loop is running, driving %s.%s on a helper thread",
        type(context.target).__name__,
        context.method.name,
    )
    ctx = contextvars.copy_context()
    with ThreadPoolExecutor(
        max_workers=1,
        thread_name_prefix="chainify-sync",
    ) as pool:
        pool.submit(ctx.run, asyncio.run, drive()).result()
