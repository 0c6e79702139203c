from __future__ import annotations

import dataclasses
import types
from typing import Any, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from typing_extensions import is_typeddict, override

from chainify._internal.exceptions import ResultTypeError
from chainify._internal.typeadapter.base import Loader

_ARBITRARY_TYPES = ConfigDict(arbitrary_types_allowed=True)


def _has_own_config(tp: Any) -> bool:  # noqa: ANN401
    # list[int] passes isinstance(tp, type) on older interpreters.
    if get_origin(tp) is not None:
        return False
    if isinstance(tp, type) and issubclass(tp, BaseModel):
        return True
    return dataclasses.is_dataclass(tp) or is_typeddict(tp)


def _is_plain_class(tp: Any) -> bool:  # noqa: ANN401
    return (
        isinstance(tp, type)
        and get_origin(tp) is None
        and not is_typeddict(tp)
        and not getattr(tp, "_is_protocol", False)
    )


def _plain_classes(tp: Any) -> tuple[type[Any], ...] | None:  # noqa: ANN401
    if _is_plain_class(tp):
        return (tp,)
    if get_origin(tp) in (Union, types.UnionType):
        args = get_args(tp)
        if all(_is_plain_class(arg) for arg in args):
            return args
    return None


def _is_unchecked(tp: Any) -> bool:  # noqa: ANN401
    if tp is Any or isinstance(tp, TypeVar):
        return True
    # isinstance() against a plain Protocol raises TypeError.
    return (
        isinstance(tp, type)
        and getattr(tp, "_is_protocol", False)
        and not getattr(tp, "_is_runtime_protocol", False)
    )


def create_type_adapter(tp: Any) -> TypeAdapter[Any]:  # noqa: ANN401
    if _has_own_config(tp):
        return TypeAdapter(tp)
    return TypeAdapter(tp, config=_ARBITRARY_TYPES)


class PydanticLoader(Loader):
    """Check results against their declared type with pydantic.

    By default the value the implementation returned is handed back
    as-is, validation only decides whether it is acceptable. Instances of
    a declared class (including subclasses, so `True` is an `int`) are
    accepted without going through pydantic. Generic containers, unions,
    models and dataclasses are checked structurally in strict mode.

    With `rebuild=True` the validated value produced by pydantic is
    returned instead. Combine it with `strict=False` to coerce results,
    e.g. `"1"` into `1`.
    """

    __slots__: tuple[str, ...] = ("_adapters", "rebuild", "strict")

    def __init__(self, *, strict: bool = True, rebuild: bool = False) -> None:
        self.strict: bool = strict
        self.rebuild: bool = rebuild
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    @override
    def load(self, data: Any, tp: Any, /) -> Any:
        if _is_unchecked(tp):
            return data
        classes = _plain_classes(tp)
        if not self.rebuild and classes and isinstance(data, classes):
            return data

        adapter = self._adapters.get(tp)
        if adapter is None:
            adapter = self._adapters[tp] = create_type_adapter(tp)

        try:
            validated = adapter.validate_python(data, strict=self.strict)
        except ValidationError as exc:
            raise ResultTypeError(tp, data) from exc
        return validated if self.rebuild else data
