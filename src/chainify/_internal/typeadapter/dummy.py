from __future__ import annotations

from typing import Any

from typing_extensions import override

from chainify._internal.typeadapter.base import Loader


class DummyLoader(Loader):
    @override
    def load(self, data: Any, tp: Any, /) -> Any:
        return data
