from __future__ import annotations

from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class Loader(Protocol):
    """Turn an untyped result slot value into the declared result type."""

    def load(self, data: Any, tp: type[T], /) -> T:  # noqa: ANN401
        raise NotImplementedError
