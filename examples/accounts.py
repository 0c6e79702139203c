"""An account service wrapped with timing and fallback middleware.

Shows global middleware, service-specific middleware added through the
`configure` callback, and a collaborator looked up through the resolver.
"""

import abc
import asyncio
import logging
import time

from chainify import Chainify, InvocationContext
from chainify.middleware import CallNext, MiddlewarePipeline

logger = logging.getLogger(__name__)


class Accounts(abc.ABC):
    @abc.abstractmethod
    def owner(self, account_id: int) -> str: ...

    @abc.abstractmethod
    async def balance(self, account_id: int) -> float: ...

    @abc.abstractmethod
    async def close(self, account_id: int) -> None: ...


class InMemoryAccounts(Accounts):
    def __init__(self) -> None:
        self._balances: dict[int, float] = {1: 120.5, 2: 0.0}

    def owner(self, account_id: int) -> str:
        return f"owner-{account_id}"

    async def balance(self, account_id: int) -> float:
        await asyncio.sleep(0.01)
        return self._balances[account_id]

    async def close(self, account_id: int) -> None:
        del self._balances[account_id]


async def timing(call_next: CallNext, context: InvocationContext) -> None:
    start = time.perf_counter()
    await call_next(context)
    logger.info(
        "%s took %.2fms",
        context.method.name,
        (time.perf_counter() - start) * 1000,
    )


async def default_balance(
    call_next: CallNext,
    context: InvocationContext,
) -> None:
    await call_next(context)
    if isinstance(context.exception, KeyError):
        context.exception = None
        context.result = context.resolver.get("default_balance")


def configure_accounts(pipeline: MiddlewarePipeline) -> None:
    _ = pipeline.use(default_balance)


def create_app() -> Chainify:
    app = Chainify(middleware=[timing])
    app.provide("default_balance", 0.0)
    return app


async def _main() -> None:
    app = create_app()
    accounts = app.wrap(
        Accounts,
        InMemoryAccounts(),
        configure=configure_accounts,
    )

    logger.info("Owner: %s", accounts.owner(1))
    logger.info("Balance: %s", await accounts.balance(1))
    await accounts.close(1)
    logger.info("Balance after close: %s", await accounts.balance(1))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(_main())
