from __future__ import annotations

import functools
import logging
import types
from typing import TYPE_CHECKING, Any, TypeVar, cast, final

from chainify._internal.common.constants import PROXY_ATTR, ReturnShape
from chainify._internal.context import InvocationContext
from chainify._internal.exceptions import (
    InvalidArgumentError,
    NotConfiguredError,
)
from chainify._internal.inspection import MethodSpec, describe_interface
from chainify._internal.runners import run_until_settled
from chainify._internal.typeadapter.strict import PydanticLoader

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from chainify._internal.middleware.pipeline import Chain
    from chainify._internal.typeadapter.base import Loader

T = TypeVar("T")

logger = logging.getLogger("chainify.interceptor")


@final
class Interceptor:
    """Routes calls on a stand-in through a compiled `Chain`.

    Value-shaped methods block until the chain settles. Completion and
    result shaped methods return a coroutine right away, the chain runs
    when it is awaited.
    """

    __slots__: tuple[str, ...] = (
        "_loader",
        "_pipeline",
        "_resolver",
        "_target",
    )

    def __init__(self, *, loader: Loader | None = None) -> None:
        self._loader: Loader = PydanticLoader() if loader is None else loader
        self._target: Any = None
        self._resolver: Any = None
        self._pipeline: Chain | None = None

    def configure(
        self,
        target: Any,  # noqa: ANN401
        resolver: Any,  # noqa: ANN401
        pipeline: Chain,
    ) -> None:
        if target is None:
            raise InvalidArgumentError("target")
        if resolver is None:
            raise InvalidArgumentError("resolver")
        if pipeline is None:
            raise InvalidArgumentError("pipeline")
        self._target = target
        self._resolver = resolver
        self._pipeline = pipeline

    @property
    def is_configured(self) -> bool:
        return self._pipeline is not None

    @property
    def target(self) -> Any:  # noqa: ANN401
        return self._target

    @property
    def pipeline(self) -> Chain | None:
        return self._pipeline

    def invoke(
        self,
        method: MethodSpec | None,
        args: Sequence[Any] | None = None,
        kwargs: Mapping[str, Any] | None = None,
    ) -> Any:  # noqa: ANN401
        if self._pipeline is None:
            raise NotConfiguredError
        if method is None:
            raise InvalidArgumentError("method")

        arguments = method.signature.bind(*(args or ()), **(kwargs or {}))
        arguments.apply_defaults()
        context = InvocationContext(
            target=self._target,
            method=method,
            arguments=arguments,
            resolver=self._resolver,
        )
        logger.debug(
            "Dispatching %s.%s (%s)",
            type(self._target).__name__,
            method.name,
            method.shape.value,
        )

        if method.shape is ReturnShape.VALUE:
            run_until_settled(self._pipeline, context)
            return self._settle(context)
        return self._settle_async(self._pipeline, context)

    async def _settle_async(
        self,
        pipeline: Chain,
        context: InvocationContext,
    ) -> Any:  # noqa: ANN401
        await pipeline(context)
        return self._settle(context)

    def _settle(self, context: InvocationContext) -> Any:  # noqa: ANN401
        method = context.method
        if context.exception is not None:
            logger.debug(
                "%s.%s failed with %s",
                type(self._target).__name__,
                method.name,
                type(context.exception).__name__,
            )
            raise context.exception

        if method.returns_none:
            return None
        result = context.result if context.has_result else None
        return self._loader.load(result, method.result_type)

    def __repr__(self) -> str:
        if self._pipeline is None:
            return f"{type(self).__name__}(<not configured>)"
        return f"{type(self).__name__}({self._target!r}, {self._pipeline!r})"


def get_interceptor(proxy: object) -> Interceptor:
    """Return the engine behind a stand-in created by `create_proxy`."""
    try:
        return object.__getattribute__(proxy, PROXY_ATTR)
    except AttributeError:
        msg = f"{type(proxy).__name__!r} object is not a chainify proxy"
        raise TypeError(msg) from None


def _make_forwarder(
    spec: MethodSpec,
    original: Callable[..., Any],
) -> Callable[..., Any]:
    def forwarder(self: object, /, *args: Any, **kwargs: Any) -> Any:  # noqa: ANN401
        return get_interceptor(self).invoke(spec, args, kwargs)

    # `updated=()` keeps `__isabstractmethod__` off the forwarder.
    return functools.update_wrapper(forwarder, original, updated=())


@final
class TargetAttribute:
    """Read an abstract non-method member straight from the target.

    Used for abstract properties, class methods and dunders. Access does
    not go through the middleware chain.
    """

    __slots__: tuple[str, ...] = ("name",)

    def __init__(self, name: str) -> None:
        self.name: str = name

    def __get__(
        self,
        instance: object,
        owner: type[Any] | None = None,
    ) -> Any:  # noqa: ANN401
        if instance is None:
            return self
        return getattr(get_interceptor(instance).target, self.name)

    def __set__(self, instance: object, value: Any) -> None:  # noqa: ANN401
        setattr(get_interceptor(instance).target, self.name, value)


def _proxy_repr(self: object) -> str:
    return f"<{type(self).__name__} {get_interceptor(self)!r}>"


@functools.cache
def make_proxy_class(iface: type[T]) -> type[T]:
    namespace: dict[str, Any] = {
        "__module__": iface.__module__,
        "__doc__": iface.__doc__,
        "__repr__": _proxy_repr,
    }
    specs = describe_interface(iface)
    for name, spec in specs.items():
        namespace[name] = _make_forwarder(spec, getattr(iface, name))
    # Leftover abstract members would keep the proxy class abstract.
    for name in getattr(iface, "__abstractmethods__", ()):
        if name not in specs:
            namespace[name] = TargetAttribute(name)

    return cast(
        "type[T]",
        types.new_class(
            f"{iface.__name__}Proxy",
            (iface,),
            exec_body=lambda ns: ns.update(namespace),
        ),
    )


def create_proxy(iface: type[T], interceptor: Interceptor) -> T:
    """Instantiate a stand-in for *iface* without calling its `__init__`."""
    cls = make_proxy_class(iface)
    proxy = cls.__new__(cls)
    object.__setattr__(proxy, PROXY_ATTR, interceptor)
    return proxy


def create_interceptor(  # noqa: PLR0913
    iface: type[T],
    target: Any,  # noqa: ANN401
    resolver: Any,  # noqa: ANN401
    pipeline: Chain,
    *,
    loader: Loader | None = None,
) -> T:
    interceptor = Interceptor(loader=loader)
    interceptor.configure(target, resolver, pipeline)
    return create_proxy(iface, interceptor)
