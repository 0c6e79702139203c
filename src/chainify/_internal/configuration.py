from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chainify._internal.common.constants import RunMode

if TYPE_CHECKING:
    from concurrent.futures import ThreadPoolExecutor

    from chainify._internal.common.types import LoopFactory
    from chainify._internal.typeadapter.base import Loader


@dataclass(slots=True, kw_only=True)
class ChainifyConfiguration:
    loader: Loader
    run_mode: RunMode = RunMode.MAIN
    getloop: LoopFactory = field(default=asyncio.get_running_loop)
    threadpool: ThreadPoolExecutor | None = None
