from __future__ import annotations

import functools
from abc import ABCMeta, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chainify._internal.common.types import CallNext, TerminalStep
    from chainify._internal.context import InvocationContext


@runtime_checkable
class BaseMiddleware(Protocol, metaclass=ABCMeta):
    @abstractmethod
    async def __call__(
        self,
        call_next: CallNext,
        context: InvocationContext,
    ) -> None:
        pass


def build_middleware(
    middleware: Sequence[BaseMiddleware],
    /,
    func: TerminalStep,
) -> CallNext:
    """Wrap *func* so the first middleware in the sequence runs outermost."""
    chain_of_middlewares = func
    for m in reversed(middleware):
        chain_of_middlewares = functools.partial(m, chain_of_middlewares)

    return chain_of_middlewares
