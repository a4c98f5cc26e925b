"""Operation synthesis: the handler pipeline and its helpers."""

from odata_openapi.operation.context import GenerationContext
from odata_openapi.operation.handlers import (
    HANDLERS,
    PAGEABLE_EXTENSION,
    get_handler,
    register_handler,
    synthesize_operation,
)
from odata_openapi.operation.pipeline import (
    DEFAULT_PHASES,
    PHASE_ORDER,
    HandlerState,
    OperationHandler,
    OperationTarget,
    OperationType,
    Phase,
    TargetKind,
)
from odata_openapi.operation.security import create_security_requirements, security_for

__all__ = [
    "DEFAULT_PHASES",
    "GenerationContext",
    "HANDLERS",
    "HandlerState",
    "OperationHandler",
    "OperationTarget",
    "OperationType",
    "PAGEABLE_EXTENSION",
    "PHASE_ORDER",
    "Phase",
    "TargetKind",
    "create_security_requirements",
    "get_handler",
    "register_handler",
    "security_for",
    "synthesize_operation",
]
