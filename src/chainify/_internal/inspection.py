from __future__ import annotations

import asyncio
import collections.abc
import functools
import inspect
from dataclasses import dataclass
from types import FunctionType
from typing import Any, TypeAlias, get_args, get_origin, get_type_hints

from chainify._internal.common.constants import ReturnShape

ParamName: TypeAlias = str
TypeHint: TypeAlias = Any

_NONE_TYPES = (None, type(None))
_AWAITABLE_ORIGINS = (
    collections.abc.Awaitable,
    collections.abc.Coroutine,
    asyncio.Future,
    asyncio.Task,
)


@dataclass(slots=True, kw_only=True, frozen=True)
class MethodSpec:
    name: str
    signature: inspect.Signature
    params_type: dict[ParamName, TypeHint]
    result_type: TypeHint
    shape: ReturnShape

    @property
    def returns_none(self) -> bool:
        return self.result_type in _NONE_TYPES


def get_params_type(
    sig: inspect.Signature,
    hints: dict[str, Any],
) -> dict[ParamName, TypeHint]:
    return {
        arg.name: hints.get(arg.name, Any) for arg in sig.parameters.values()
    }


def get_result_shape(
    hints: dict[str, Any],
    *,
    is_async: bool,
) -> tuple[TypeHint, ReturnShape]:
    result_type = hints.get("return", Any)
    if not is_async:
        origin = get_origin(result_type)
        if origin not in _AWAITABLE_ORIGINS and result_type not in (
            _AWAITABLE_ORIGINS
        ):
            return result_type, ReturnShape.VALUE
        # Coroutine[YieldT, SendT, ReturnT] keeps the value last.
        args = get_args(result_type)
        result_type = args[-1] if args else Any

    if result_type in _NONE_TYPES:
        return type(None), ReturnShape.COMPLETION
    return result_type, ReturnShape.RESULT


def _unresolved(hint: Any) -> TypeHint:  # noqa: ANN401
    if hint is None or hint == "None":
        return type(None)
    return Any if isinstance(hint, str) else hint


def get_hints(func: FunctionType) -> dict[str, TypeHint]:
    try:
        return get_type_hints(func)
    except NameError:
        # Names imported under TYPE_CHECKING only. The shape still follows
        # from `async def` and a literal `None` return.
        return {
            name: _unresolved(hint)
            for name, hint in func.__annotations__.items()
        }


def make_method_spec(func: FunctionType) -> MethodSpec:
    """Describe an unbound interface method, dropping its `self` parameter."""
    sig = inspect.signature(func)
    params = list(sig.parameters.values())[1:]
    sig = sig.replace(parameters=params)

    hints = get_hints(func)
    result_type, shape = get_result_shape(
        hints,
        is_async=inspect.iscoroutinefunction(func),
    )
    return MethodSpec(
        name=func.__name__,
        signature=sig,
        params_type=get_params_type(sig, hints),
        result_type=result_type,
        shape=shape,
    )


def _is_intercepted(name: str, abstract: frozenset[str]) -> bool:
    if name.startswith("__") and name.endswith("__"):
        return False
    return not name.startswith("_") or name in abstract


@functools.cache
def describe_interface(iface: type[Any]) -> dict[str, MethodSpec]:
    """Collect the methods of *iface* that a stand-in must intercept.

    Public functions are taken along the MRO, first definition wins.
    Private names are only taken when they are abstract, so a generated
    subclass can still be instantiated.
    """
    abstract = frozenset(getattr(iface, "__abstractmethods__", ()))
    specs: dict[str, MethodSpec] = {}
    seen: set[str] = set()
    for klass in iface.__mro__:
        if klass is object:
            continue
        for name, member in vars(klass).items():
            if name in seen or not _is_intercepted(name, abstract):
                continue
            seen.add(name)
            if isinstance(member, FunctionType):
                specs[name] = make_method_spec(member)
    return specs
