"""Generation context shared by every synthesis call."""

from __future__ import annotations

from dataclasses import dataclass, field

from odata_openapi.authorization import SecuritySchemeRegistry
from odata_openapi.edm.model import EdmModel
from odata_openapi.errors import InvalidArgumentError
from odata_openapi.settings import GeneratorSettings


@dataclass(frozen=True)
class GenerationContext:
    """Everything a handler may read besides its target.

    The context is immutable and passed explicitly into each synthesis call,
    so independent targets can be synthesized in parallel.

    Attributes:
        model: The loaded entity data model.
        settings: Generator settings.
        security: Security schemes declared on the service, by name.
    """

    model: EdmModel
    settings: GeneratorSettings = field(default_factory=GeneratorSettings)
    security: SecuritySchemeRegistry = field(default_factory=SecuritySchemeRegistry)

    def __post_init__(self) -> None:
        if self.model is None:
            raise InvalidArgumentError("model")

    @classmethod
    def create(cls, model: EdmModel, settings: GeneratorSettings | None = None) -> GenerationContext:
        """Build a context, reading security schemes from the model."""
        if model is None:
            raise InvalidArgumentError("model")
        return cls(
            model=model,
            settings=settings or GeneratorSettings(),
            security=SecuritySchemeRegistry.from_model(model),
        )


__all__ = ["GenerationContext"]
