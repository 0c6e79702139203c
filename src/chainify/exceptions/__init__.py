"""Custom exceptions for the chainify library.

Configuration and invalid-input errors are raised immediately at the call
or registration site. Failures of the wrapped implementation are never
wrapped in these types, the original exception reaches the caller.
"""

from chainify._internal.exceptions import (
    BaseChainifyError,
    DependencyNotFoundError,
    InvalidArgumentError,
    NotConfiguredError,
    ResultTypeError,
)

__all__ = (
    "BaseChainifyError",
    "DependencyNotFoundError",
    "InvalidArgumentError",
    "NotConfiguredError",
    "ResultTypeError",
)
