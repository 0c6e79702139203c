import threading
from typing import Any
from unittest.mock import Mock

import pytest

from chainify import (
    Chainify,
    InvocationContext,
    RunMode,
    get_interceptor,
)
from chainify.exceptions import DependencyNotFoundError, InvalidArgumentError
from chainify.middleware import CallNext, MiddlewarePipeline
from chainify.typeadapter import DummyLoader, PydanticLoader
from tests.conftest import (
    Greeter,
    GreeterService,
    RecordingMiddleware,
    create_app,
)


def test_add_middleware_rejects_none() -> None:
    app = create_app()

    with pytest.raises(InvalidArgumentError, match="'middleware'"):
        app.add_middleware(None)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgumentError):
        _ = Chainify(middleware=[None])  # type: ignore[list-item]


def test_defaults() -> None:
    app = create_app()

    assert app.middleware == ()
    assert isinstance(app.configs.loader, PydanticLoader)
    assert app.configs.run_mode is RunMode.MAIN
    assert app.configs.threadpool is None


def test_wrap_registers_proxy() -> None:
    app = create_app()

    service = app.wrap(Greeter, GreeterService())

    assert isinstance(service, Greeter)
    assert service.greet("Ann") == "Hello, Ann!"


def test_configure_callback_receives_pipeline() -> None:
    configure = Mock()
    app = create_app()

    _ = app.build_pipeline(Greeter, GreeterService(), configure)

    configure.assert_called_once()
    (pipeline,), _ = configure.call_args
    assert isinstance(pipeline, MiddlewarePipeline)


def test_global_middleware_runs_before_service_middleware() -> None:
    log: list[str] = []
    app = create_app(middleware=[RecordingMiddleware("g1", log)])
    app.add_middleware(RecordingMiddleware("g2", log))

    def configure(pipeline: MiddlewarePipeline) -> None:
        _ = pipeline.use(RecordingMiddleware("s1", log))
        _ = pipeline.use(RecordingMiddleware("s2", log))

    service = app.wrap(Greeter, GreeterService(), configure=configure)
    _ = service.greet("Ann")

    assert log == [
        "g1:before",
        "g2:before",
        "s1:before",
        "s2:before",
        "s2:after",
        "s1:after",
        "g2:after",
        "g1:after",
    ]


def test_global_middleware_added_later_is_not_applied() -> None:
    log: list[str] = []
    app = create_app()
    app.add_middleware(RecordingMiddleware("m1", log))
    service = GreeterService()
    pipeline = app.build_pipeline(Greeter, service)
    app.add_middleware(RecordingMiddleware("m2", log))

    proxy = app.create_interceptor(Greeter, service, app, pipeline)
    _ = proxy.greet("Ann")

    assert log == ["m1:before", "m1:after"]
    assert len(pipeline) == 1
    assert len(app.middleware) == 2


def test_wrapped_services_get_separate_pipelines() -> None:
    app = create_app()

    first = app.wrap(Greeter, GreeterService())
    second = app.wrap(Greeter, GreeterService())

    assert get_interceptor(first).pipeline is not get_interceptor(
        second,
    ).pipeline


async def test_app_is_default_resolver() -> None:
    resolved: list[Any] = []

    async def lookup(call_next: CallNext, context: InvocationContext) -> None:
        resolved.append(context.resolver.get("prefix"))
        await call_next(context)

    app = create_app(middleware=[lookup])
    app.provide("prefix", ">>")

    service = app.wrap(Greeter, GreeterService())

    assert await service.fetch("abc") == 3
    assert resolved == [">>"]


async def test_explicit_resolver() -> None:
    resolvers: list[Any] = []

    async def lookup(call_next: CallNext, context: InvocationContext) -> None:
        resolvers.append(context.resolver)
        await call_next(context)

    app = create_app(middleware=[lookup])
    container = {"clock": object()}

    service = app.wrap(Greeter, GreeterService(), resolver=container)
    await service.save("Ann")

    assert resolvers == [container]


def test_provide_and_get() -> None:
    app = create_app()
    app.provide(GreeterService, GreeterService())

    assert GreeterService in app
    assert isinstance(app.get(GreeterService), GreeterService)
    assert "missing" not in app
    with pytest.raises(DependencyNotFoundError, match="'missing'"):
        _ = app.get("missing")
    with pytest.raises(LookupError):
        _ = app.get(Greeter)


async def test_loader_is_shared_with_interceptors() -> None:
    async def corrupt(call_next: CallNext, context: InvocationContext) -> None:
        await call_next(context)
        context.result = "not an int"

    app = create_app(loader=DummyLoader(), middleware=[corrupt])

    service = app.wrap(Greeter, GreeterService())

    assert await service.fetch("abc") == "not an int"


async def test_thread_run_mode() -> None:
    class BlockingGreeter(GreeterService):
        def fetch(self, key: str) -> int:  # type: ignore[override]
            return threading.get_ident()

    app = create_app(run_mode=RunMode.THREAD)

    service = app.wrap(Greeter, BlockingGreeter())

    assert await service.fetch("abc") != threading.get_ident()
