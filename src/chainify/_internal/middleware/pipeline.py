from __future__ import annotations

import logging
from typing import TYPE_CHECKING, final

from typing_extensions import Self

from chainify._internal.exceptions import InvalidArgumentError
from chainify._internal.middleware.base import build_middleware
from chainify._internal.runners import TargetInvoker

if TYPE_CHECKING:
    from collections.abc import Awaitable, Sequence

    from chainify._internal.common.types import CallNext, TerminalStep
    from chainify._internal.context import InvocationContext
    from chainify._internal.middleware.base import BaseMiddleware

logger = logging.getLogger("chainify.pipeline")


def _middleware_name(middleware: object) -> str:
    return getattr(middleware, "__qualname__", type(middleware).__qualname__)


@final
class Chain:
    """A compiled middleware chain.

    Built once per wrapped service and shared by all of its calls,
    nothing about it changes after construction.
    """

    __slots__: tuple[str, ...] = ("_call", "_middleware", "_terminal")

    def __init__(
        self,
        middleware: tuple[BaseMiddleware, ...],
        terminal: TerminalStep,
    ) -> None:
        self._middleware = middleware
        self._terminal = terminal
        self._call: CallNext = build_middleware(middleware, terminal)

    @property
    def middleware(self) -> tuple[BaseMiddleware, ...]:
        return self._middleware

    @property
    def terminal(self) -> TerminalStep:
        return self._terminal

    def __call__(self, context: InvocationContext) -> Awaitable[None]:
        return self._call(context)

    def __len__(self) -> int:
        return len(self._middleware)

    def __repr__(self) -> str:
        names = ", ".join(_middleware_name(m) for m in self._middleware)
        return f"{type(self).__name__}([{names}])"


@final
class MiddlewarePipeline:
    """Ordered middleware registrations, compiled into a `Chain`.

    The first registered middleware becomes the outermost wrapper: it
    sees the call first on the way in and last on the way out.
    """

    __slots__: tuple[str, ...] = ("_middlewares",)

    def __init__(
        self,
        middlewares: Sequence[BaseMiddleware] | None = None,
    ) -> None:
        self._middlewares: list[BaseMiddleware] = []
        for middleware in middlewares or ():
            _ = self.use(middleware)

    def use(self, middleware: BaseMiddleware) -> Self:
        if middleware is None:
            raise InvalidArgumentError("middleware")
        self._middlewares.append(middleware)
        logger.debug("Registered middleware %s", _middleware_name(middleware))
        return self

    @property
    def middleware(self) -> tuple[BaseMiddleware, ...]:
        return tuple(self._middlewares)

    def compose(self, terminal: TerminalStep | None = None) -> Chain:
        if terminal is None:
            terminal = TargetInvoker()
        chain = Chain(tuple(self._middlewares), terminal)
        logger.debug("Compiled %r", chain)
        return chain

    def __len__(self) -> int:
        return len(self._middlewares)
