"""Exception hierarchy for odata-openapi.

Only two kinds of problems surface as exceptions:

- Invalid arguments to a public entry point (missing model, target, verb).
- Synthesis failures for a single target (its declared type cannot be found).

Malformed annotations and unknown security schemes are not errors. They
decode to defaults or are dropped with a warning.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Stable codes attached to every odata-openapi error."""

    INVALID_ARGUMENT = "E001"
    SYNTHESIS_FAILED = "E100"
    UNKNOWN_HANDLER = "E101"
    MODEL_LOAD_FAILED = "E200"
    CONFIG_INVALID = "E300"


@dataclass
class ErrorContext:
    """Extra structured information carried by an error.

    Attributes:
        target: Description of the model element being processed, if any.
        extra: Free-form details useful for diagnostics.
    """

    target: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        if self.target is not None:
            data["target"] = self.target
        return data


class ODataOpenAPIError(Exception):
    """Base class for all odata-openapi errors."""

    default_code = ErrorCode.SYNTHESIS_FAILED

    def __init__(
        self,
        message: str,
        code: ErrorCode | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.code = code or self.default_code
        self.context = context or ErrorContext()
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "type": type(self).__name__,
            "message": self.message,
            "context": self.context.to_dict(),
        }


class InvalidArgumentError(ODataOpenAPIError, ValueError):
    """Raised when a required argument to a public entry point is missing."""

    default_code = ErrorCode.INVALID_ARGUMENT

    def __init__(self, argument: str, message: str | None = None) -> None:
        self.argument = argument
        super().__init__(
            message or f"Argument '{argument}' must not be None",
            context=ErrorContext(extra={"argument": argument}),
        )


class SynthesisError(ODataOpenAPIError):
    """Raised when an operation cannot be synthesized for one target.

    The failure is scoped to that target. Callers drop the partial operation
    and carry on with the next target.
    """

    default_code = ErrorCode.SYNTHESIS_FAILED

    def __init__(self, message: str, target: str | None = None, **extra: Any) -> None:
        super().__init__(message, context=ErrorContext(target=target, extra=extra))

    @property
    def target(self) -> str | None:
        return self.context.target


class UnknownHandlerError(ODataOpenAPIError):
    """Raised when no handler is registered for a (target kind, verb) pair."""

    default_code = ErrorCode.UNKNOWN_HANDLER


class ModelLoadError(ODataOpenAPIError):
    """Raised when a model description cannot be read or parsed."""

    default_code = ErrorCode.MODEL_LOAD_FAILED

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message, context=ErrorContext(extra={"path": path} if path else {}))


class ConfigValidationError(ODataOpenAPIError):
    """Raised when generator settings fail validation."""

    default_code = ErrorCode.CONFIG_INVALID

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        context: ErrorContext | None = None,
    ) -> None:
        self.field = field
        self.value = value
        context = context or ErrorContext()
        if field is not None:
            context.extra.setdefault("field", field)
        super().__init__(message, context=context)


__all__ = [
    "ConfigValidationError",
    "ErrorCode",
    "ErrorContext",
    "InvalidArgumentError",
    "ModelLoadError",
    "ODataOpenAPIError",
    "SynthesisError",
    "UnknownHandlerError",
]
