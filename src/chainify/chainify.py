"""Chainify entrypoint."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from chainify._internal.common.constants import RunMode
from chainify._internal.configuration import ChainifyConfiguration
from chainify._internal.exceptions import (
    DependencyNotFoundError,
    InvalidArgumentError,
)
from chainify._internal.interceptor import create_interceptor
from chainify._internal.middleware.pipeline import MiddlewarePipeline
from chainify._internal.runners import TargetInvoker
from chainify._internal.typeadapter.strict import PydanticLoader

if TYPE_CHECKING:
    from collections.abc import Sequence
    from concurrent.futures import ThreadPoolExecutor

    from chainify._internal.common.types import Configure, LoopFactory
    from chainify._internal.middleware.base import BaseMiddleware
    from chainify._internal.middleware.pipeline import Chain
    from chainify._internal.typeadapter.base import Loader

logger = logging.getLogger("chainify")

T = TypeVar("T")


class Chainify:
    """Composition root for intercepted services.

    Holds the global middleware list, the shared configuration and a
    small registry of collaborators that middleware can look up through
    `InvocationContext.resolver`.

    Global middleware is copied into a pipeline when that pipeline is
    built. Adding middleware later does not change services that were
    already wrapped.
    """

    def __init__(  # noqa: PLR0913
        self,
        *,
        middleware: Sequence[BaseMiddleware] | None = None,
        loader: Loader | None = None,
        run_mode: RunMode = RunMode.MAIN,
        threadpool_executor: ThreadPoolExecutor | None = None,
        loop_factory: LoopFactory = asyncio.get_running_loop,
    ) -> None:
        """Initialize a `Chainify` instance."""
        if loader is None:
            loader = PydanticLoader()

        self.configs: ChainifyConfiguration = ChainifyConfiguration(
            loader=loader,
            run_mode=run_mode,
            getloop=loop_factory,
            threadpool=threadpool_executor,
        )
        self._middleware: list[BaseMiddleware] = []
        self._dependencies: dict[Any, Any] = {}
        for m in middleware or ():
            self.add_middleware(m)

    @property
    def middleware(self) -> tuple[BaseMiddleware, ...]:
        return tuple(self._middleware)

    def add_middleware(self, middleware: BaseMiddleware) -> None:
        """Append *middleware* to the global list.

        Raises:
            InvalidArgumentError: If *middleware* is None.

        """
        if middleware is None:
            raise InvalidArgumentError("middleware")
        self._middleware.append(middleware)
        logger.debug(
            "Added global middleware %r (%d total)",
            middleware,
            len(self._middleware),
        )

    def build_pipeline(
        self,
        iface: type[Any],
        target: Any,  # noqa: ANN401
        configure: Configure | None = None,
    ) -> Chain:
        """Compile the chain for one wrapped service.

        Args:
            iface: The service interface being wrapped.
            target: The real implementation.
            configure: Optional callback that registers service-specific
                middleware. It runs after the global middleware has been
                copied in, so its middleware always sits inside.

        Returns:
            The compiled `Chain`, ready to be shared by every call.

        """
        pipeline = MiddlewarePipeline(self._middleware)
        if configure is not None:
            configure(pipeline)

        logger.debug(
            "Building pipeline for %s -> %s with %d middleware",
            iface.__qualname__,
            type(target).__qualname__,
            len(pipeline),
        )
        return pipeline.compose(TargetInvoker(self.configs))

    def create_interceptor(
        self,
        iface: type[T],
        target: Any,  # noqa: ANN401
        resolver: Any,  # noqa: ANN401
        pipeline: Chain,
    ) -> T:
        """Return a stand-in implementing *iface* that routes through *pipeline*."""
        return create_interceptor(
            iface,
            target,
            resolver,
            pipeline,
            loader=self.configs.loader,
        )

    def wrap(
        self,
        iface: type[T],
        target: Any,  # noqa: ANN401
        *,
        configure: Configure | None = None,
        resolver: Any = None,  # noqa: ANN401
    ) -> T:
        """Build a pipeline for *target* and return its stand-in.

        When *resolver* is omitted the app itself is used, so middleware
        can call `context.resolver.get(...)` for anything registered with
        `provide()`.
        """
        pipeline = self.build_pipeline(iface, target, configure)
        return self.create_interceptor(
            iface,
            target,
            self if resolver is None else resolver,
            pipeline,
        )

    def provide(self, key: Any, value: Any) -> None:  # noqa: ANN401
        """Register a collaborator for middleware to resolve."""
        self._dependencies[key] = value

    def get(self, key: type[T] | Any) -> T:  # noqa: ANN401
        """Resolve a collaborator registered with `provide()`.

        Raises:
            DependencyNotFoundError: If nothing was provided for *key*.

        """
        try:
            return self._dependencies[key]
        except KeyError:
            raise DependencyNotFoundError(key) from None

    def __contains__(self, key: object) -> bool:
        return key in self._dependencies
