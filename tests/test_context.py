import pytest

from chainify import EMPTY, ReturnShape
from tests.conftest import GreeterService, make_context


def test_fixed_fields_are_read_only() -> None:
    service = GreeterService()
    context = make_context(service, "greet", "Ann", resolver={"db": 1})

    assert context.target is service
    assert context.method.name == "greet"
    assert context.method.shape is ReturnShape.VALUE
    assert context.resolver == {"db": 1}

    for attr in ("target", "method", "resolver"):
        with pytest.raises(AttributeError):
            setattr(context, attr, None)


def test_outcome_slots_start_unset() -> None:
    context = make_context(GreeterService(), "greet", "Ann")

    assert context.result is EMPTY
    assert context.has_result is False
    assert context.exception is None

    context.result = None
    assert context.has_result is True


def test_arguments_are_positional_with_defaults_applied() -> None:
    context = make_context(GreeterService(), "greet", "Ann")

    assert context.arguments.args == ("Ann", "!")
    assert context.arguments.kwargs == {}

    context.arguments.arguments["name"] = "Bob"
    assert context.arguments.args == ("Bob", "!")


def test_no_free_attributes() -> None:
    context = make_context(GreeterService(), "greet", "Ann")

    with pytest.raises(AttributeError):
        context.extra = 1  # type: ignore[attr-defined]


def test_repr() -> None:
    context = make_context(GreeterService(), "fetch", "key")
    context.result = 3

    assert repr(context) == (
        "InvocationContext(method=GreeterService.fetch, "
        "result=3, exception=None)"
    )
