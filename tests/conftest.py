from __future__ import annotations

import abc
import asyncio
from typing import Any

from typing_extensions import override

from chainify import Chainify, InvocationContext, describe_interface
from chainify.middleware import BaseMiddleware, CallNext


class BoomError(Exception):
    pass


class Greeter(abc.ABC):
    @abc.abstractmethod
    def greet(self, name: str, punctuation: str = "!") -> str: ...

    @abc.abstractmethod
    def fail(self) -> str: ...

    @abc.abstractmethod
    def reset(self) -> None: ...

    @abc.abstractmethod
    async def save(self, name: str) -> None: ...

    @abc.abstractmethod
    async def fetch(self, key: str) -> int: ...

    @abc.abstractmethod
    async def fetch_many(self, keys: list[str]) -> dict[str, list[int]]: ...

    @abc.abstractmethod
    async def fail_async(self) -> int: ...


class GreeterService(Greeter):
    def __init__(self, exc: Exception | None = None) -> None:
        self.exc: Exception = exc or BoomError("boom")
        self.calls: list[str] = []
        self.saved: list[str] = []

    @override
    def greet(self, name: str, punctuation: str = "!") -> str:
        self.calls.append("greet")
        return f"Hello, {name}{punctuation}"

    @override
    def fail(self) -> str:
        self.calls.append("fail")
        raise self.exc

    @override
    def reset(self) -> None:
        self.calls.append("reset")
        self.saved.clear()

    @override
    async def save(self, name: str) -> None:
        await asyncio.sleep(0)
        self.calls.append("save")
        self.saved.append(name)

    @override
    async def fetch(self, key: str) -> int:
        await asyncio.sleep(0)
        self.calls.append("fetch")
        return len(key)

    @override
    async def fetch_many(self, keys: list[str]) -> dict[str, list[int]]:
        await asyncio.sleep(0)
        self.calls.append("fetch_many")
        return {key: [len(key), ord(key[0])] for key in keys}

    @override
    async def fail_async(self) -> int:
        await asyncio.sleep(0)
        self.calls.append("fail_async")
        raise self.exc


class RecordingMiddleware(BaseMiddleware):
    def __init__(self, name: str, log: list[str]) -> None:
        self.name: str = name
        self.log: list[str] = log

    @override
    async def __call__(
        self,
        call_next: CallNext,
        context: InvocationContext,
    ) -> None:
        self.log.append(f"{self.name}:before")
        await call_next(context)
        self.log.append(f"{self.name}:after")

    def __repr__(self) -> str:
        return f"RecordingMiddleware({self.name!r})"


def make_context(
    target: Any,
    name: str,
    *args: Any,
    iface: type[Any] = Greeter,
    resolver: Any = None,
    **kwargs: Any,
) -> InvocationContext:
    method = describe_interface(iface)[name]
    arguments = method.signature.bind(*args, **kwargs)
    arguments.apply_defaults()
    return InvocationContext(
        target=target,
        method=method,
        arguments=arguments,
        resolver=resolver,
    )


def create_app(**kwargs: Any) -> Chainify:
    return Chainify(**kwargs)
