from __future__ import annotations

import inspect
from typing import Any, final

from chainify._internal.common.constants import EMPTY
from chainify._internal.inspection import MethodSpec


@final
class InvocationContext:
    """Per-call record passed through the middleware chain.

    `target`, `method` and `resolver` are fixed for the lifetime of the
    call. `arguments`, `result` and `exception` belong to whichever step
    wants to rewrite them.
    """

    __slots__: tuple[str, ...] = (
        "_method",
        "_resolver",
        "_target",
        "arguments",
        "exception",
        "result",
    )

    def __init__(
        self,
        *,
        target: Any,  # noqa: ANN401
        method: MethodSpec,
        arguments: inspect.BoundArguments,
        resolver: Any,  # noqa: ANN401
    ) -> None:
        self._target = target
        self._method = method
        self._resolver = resolver
        self.arguments: inspect.BoundArguments = arguments
        self.result: Any = EMPTY
        self.exception: Exception | None = None

    @property
    def target(self) -> Any:  # noqa: ANN401
        return self._target

    @property
    def method(self) -> MethodSpec:
        return self._method

    @property
    def resolver(self) -> Any:  # noqa: ANN401
        return self._resolver

    @property
    def has_result(self) -> bool:
        return self.result is not EMPTY

    def __repr__(self) -> str:
        cls_name = type(self).__name__
        target_name = type(self._target).__name__
        return (
            f"{cls_name}(method={target_name}.{self._method.name}, "
            f"result={self.result!r}, exception={self.exception!r})"
        )
