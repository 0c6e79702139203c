from typing import Any, get_origin


class BaseChainifyError(Exception):
    pass


class NotConfiguredError(BaseChainifyError, RuntimeError):
    """Raised when an interceptor is called before `configure()`."""

    def __init__(
        self,
        msg: str = (
            "Interceptor is not configured, "
            "call .configure(target, resolver, pipeline) first"
        ),
    ) -> None:
        super().__init__(msg)


class InvalidArgumentError(BaseChainifyError, ValueError):
    """Raised when a required argument is missing."""

    def __init__(self, name: str) -> None:
        self.name: str = name
        super().__init__(f"Argument {name!r} must not be None.")


class ResultTypeError(BaseChainifyError, TypeError):
    """Raised when a produced value does not match the declared type."""

    def __init__(self, expected: Any, value: Any) -> None:  # noqa: ANN401
        self.expected: Any = expected
        self.value: Any = value

        msg = (
            f"Expected a result of type {_type_repr(expected)}, "
            f"got {type(value).__name__}: {value!r:.200}"
        )
        super().__init__(msg)


class DependencyNotFoundError(BaseChainifyError, LookupError):
    """No collaborator was provided under the requested key."""

    def __init__(self, key: Any) -> None:  # noqa: ANN401
        self.key: Any = key
        super().__init__(
            f"No dependency provided for {_type_repr(key)}. "
            "Register it with .provide() before resolving."
        )


def _type_repr(tp: Any) -> str:  # noqa: ANN401
    if isinstance(tp, type) and get_origin(tp) is None:
        return tp.__qualname__
    return repr(tp)
