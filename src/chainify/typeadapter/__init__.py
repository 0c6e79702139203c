"""Loaders that turn a raw result into the declared result type."""

from chainify._internal.typeadapter.base import Loader
from chainify._internal.typeadapter.dummy import DummyLoader
from chainify._internal.typeadapter.strict import PydanticLoader

__all__ = ("DummyLoader", "Loader", "PydanticLoader")
