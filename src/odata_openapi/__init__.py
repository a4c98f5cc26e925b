"""odata-openapi - OpenAPI documents from OData models.

Resolves OData Capabilities annotations into typed restrictions and turns
them into OpenAPI operations through a fixed-phase handler pipeline.

Example:
    >>> from odata_openapi import ODataOpenAPIGenerator, load_model
    >>> generator = ODataOpenAPIGenerator(load_model("service.yaml"))
    >>> document = generator.generate()
"""

__version__ = "0.1.0"

from odata_openapi.capabilities import (
    RESOLUTION_ORDER,
    CapabilitiesTerm,
    LookupScope,
    get_restriction,
    resolve_annotation,
)
from odata_openapi.edm import EdmModel, load_model, model_from_dict
from odata_openapi.errors import (
    ConfigValidationError,
    ErrorCode,
    InvalidArgumentError,
    ModelLoadError,
    ODataOpenAPIError,
    SynthesisError,
    UnknownHandlerError,
)
from odata_openapi.generator import GenerationFailure, ODataOpenAPIGenerator, generate_document
from odata_openapi.operation import (
    GenerationContext,
    OperationTarget,
    OperationType,
    TargetKind,
    synthesize_operation,
)
from odata_openapi.settings import GeneratorSettings, load_settings

__all__ = [
    "__version__",
    # Capabilities
    "CapabilitiesTerm",
    "LookupScope",
    "RESOLUTION_ORDER",
    "get_restriction",
    "resolve_annotation",
    # Model
    "EdmModel",
    "load_model",
    "model_from_dict",
    # Synthesis
    "GenerationContext",
    "OperationTarget",
    "OperationType",
    "TargetKind",
    "synthesize_operation",
    # Document
    "GenerationFailure",
    "ODataOpenAPIGenerator",
    "generate_document",
    # Settings
    "GeneratorSettings",
    "load_settings",
    # Errors
    "ConfigValidationError",
    "ErrorCode",
    "InvalidArgumentError",
    "ModelLoadError",
    "ODataOpenAPIError",
    "SynthesisError",
    "UnknownHandlerError",
]
