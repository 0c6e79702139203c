from enum import Enum, unique
from typing import Any


class EmptyPlaceholder:
    def __repr__(self) -> str:
        return "EMPTY"

    def __hash__(self) -> int:
        return hash("EMPTY")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, self.__class__)

    def __bool__(self) -> bool:
        return False


EMPTY: Any = EmptyPlaceholder()
PROXY_ATTR = "__chainify_interceptor__"


@unique
class RunMode(str, Enum):
    MAIN = "main"
    THREAD = "thread"


@unique
class ReturnShape(str, Enum):
    VALUE = "value"
    COMPLETION = "completion"
    RESULT = "result"

    @property
    def is_async(self) -> bool:
        return self is not ReturnShape.VALUE
