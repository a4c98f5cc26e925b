"""Operation handler pipeline.

Every operation is built by running the same phases in the same order:

    Initialize -> SetBasicInfo -> SetParameters -> SetRequestBody ->
    SetResponses -> SetSecurity -> SetTags -> AppendCustomParameters ->
    Finalize

A handler for one (target kind, verb) combination is a table of phase
functions. Phases it does not override fall back to the shared defaults in
``DEFAULT_PHASES``. After SetResponses the pipeline itself appends the
``default`` error response, so it is always present and always last.

Each call to :meth:`OperationHandler.synthesize` gets a fresh
:class:`HandlerState`; nothing is shared between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from odata_openapi.capabilities.catalog import get_restriction
from odata_openapi.capabilities.terms import CapabilitiesTerm
from odata_openapi.edm.model import (
    EdmModel,
    EntitySet,
    EntityType,
    ModelElement,
    NavigationProperty,
    NavigationSource,
    Singleton,
)
from odata_openapi.errors import InvalidArgumentError, SynthesisError
from odata_openapi.openapi import (
    STATUS_DEFAULT,
    Operation,
    Tag,
    default_error_response,
)
from odata_openapi.operation.context import GenerationContext
from odata_openapi.operation.parameters import create_key_parameters
from odata_openapi.settings import GeneratorSettings

logger = logging.getLogger(__name__)


class TargetKind(Enum):
    ENTITY_SET = "entity_set"
    ENTITY = "entity"
    SINGLETON = "singleton"
    NAVIGATION_PROPERTY = "navigation_property"


class OperationType(Enum):
    GET = "get"
    POST = "post"
    PATCH = "patch"
    PUT = "put"
    DELETE = "delete"


@dataclass(frozen=True)
class OperationTarget:
    """What an operation acts on.

    Attributes:
        kind: The shape of the target.
        source: The entity set or singleton the path starts from.
        navigation_property: The navigation property, for navigation targets.
    """

    kind: TargetKind
    source: NavigationSource
    navigation_property: NavigationProperty | None = None

    def __post_init__(self) -> None:
        if self.source is None:
            raise InvalidArgumentError("source")
        if self.kind is TargetKind.NAVIGATION_PROPERTY and self.navigation_property is None:
            raise InvalidArgumentError("navigation_property", "Navigation targets need a navigation property")
        if self.kind in (TargetKind.ENTITY_SET, TargetKind.ENTITY) and not isinstance(self.source, EntitySet):
            raise InvalidArgumentError("source", f"{self.kind.value} targets need an entity set")
        if self.kind is TargetKind.SINGLETON and not isinstance(self.source, Singleton):
            raise InvalidArgumentError("source", "Singleton targets need a singleton")

    @classmethod
    def entity_set(cls, entity_set: EntitySet) -> OperationTarget:
        return cls(TargetKind.ENTITY_SET, entity_set)

    @classmethod
    def entity(cls, entity_set: EntitySet) -> OperationTarget:
        return cls(TargetKind.ENTITY, entity_set)

    @classmethod
    def singleton(cls, singleton: Singleton) -> OperationTarget:
        return cls(TargetKind.SINGLETON, singleton)

    @classmethod
    def navigation(cls, source: NavigationSource, navigation_property: NavigationProperty) -> OperationTarget:
        return cls(TargetKind.NAVIGATION_PROPERTY, source, navigation_property)

    @property
    def element(self) -> ModelElement:
        """The model element capability annotations are resolved on."""
        if self.navigation_property is not None:
            return self.navigation_property
        return self.source

    @property
    def is_keyed(self) -> bool:
        """True when the path addresses a single entity of an entity set."""
        return isinstance(self.source, EntitySet) and self.kind in (
            TargetKind.ENTITY,
            TargetKind.NAVIGATION_PROPERTY,
        )

    def __str__(self) -> str:
        if self.navigation_property is not None:
            return f"{self.source.name}/{self.navigation_property.name}"
        if self.kind is TargetKind.ENTITY:
            return f"{self.source.name}({{key}})"
        return self.source.name


class Phase(Enum):
    INITIALIZE = "initialize"
    SET_BASIC_INFO = "set_basic_info"
    SET_PARAMETERS = "set_parameters"
    SET_REQUEST_BODY = "set_request_body"
    SET_RESPONSES = "set_responses"
    SET_SECURITY = "set_security"
    SET_TAGS = "set_tags"
    APPEND_CUSTOM_PARAMETERS = "append_custom_parameters"
    FINALIZE = "finalize"


PHASE_ORDER: tuple[Phase, ...] = (
    Phase.INITIALIZE,
    Phase.SET_BASIC_INFO,
    Phase.SET_PARAMETERS,
    Phase.SET_REQUEST_BODY,
    Phase.SET_RESPONSES,
    Phase.SET_SECURITY,
    Phase.SET_TAGS,
    Phase.APPEND_CUSTOM_PARAMETERS,
    Phase.FINALIZE,
)


@dataclass
class HandlerState:
    """Per-call state of one handler run.

    ``context`` and ``target`` only become readable once the Initialize
    phase has bound them.
    """

    operation_type: OperationType
    pending_context: GenerationContext
    pending_target: OperationTarget
    operation: Operation = field(default_factory=Operation)
    _context: GenerationContext | None = None
    _target: OperationTarget | None = None
    _restrictions: dict[CapabilitiesTerm, Any] = field(default_factory=dict)

    def bind(self) -> None:
        if self._context is not None:
            raise SynthesisError("Handler state is already initialized", target=str(self.pending_target))
        self._context = self.pending_context
        self._target = self.pending_target

    @property
    def initialized(self) -> bool:
        return self._context is not None

    @property
    def context(self) -> GenerationContext:
        if self._context is None:
            raise SynthesisError("Context read before Initialize", target=str(self.pending_target))
        return self._context

    @property
    def target(self) -> OperationTarget:
        if self._target is None:
            raise SynthesisError("Target read before Initialize", target=str(self.pending_target))
        return self._target

    @property
    def model(self) -> EdmModel:
        return self.context.model

    @property
    def settings(self) -> GeneratorSettings:
        return self.context.settings

    @property
    def source_type(self) -> EntityType:
        """Declared entity type of the navigation source."""
        entity_type = self.model.get_declared_type(self.target.source)
        if entity_type is None:
            raise SynthesisError(
                f"Cannot resolve entity type '{self.target.source.entity_type}'",
                target=str(self.target),
            )
        return entity_type

    @property
    def entity_type(self) -> EntityType:
        """Entity type of what the operation returns or accepts."""
        nav = self.target.navigation_property
        if nav is None:
            return self.source_type
        entity_type = self.model.get_declared_type(nav)
        if entity_type is None:
            raise SynthesisError(f"Cannot resolve entity type '{nav.target_type}'", target=str(self.target))
        return entity_type

    def restriction(self, term: CapabilitiesTerm) -> Any:
        """Resolve and decode ``term`` for the target, once per call.

        Navigation targets first look for the term nested in the source's
        NavigationRestrictions entry for that property, then on the
        navigation property itself.
        """
        if term not in self._restrictions:
            self._restrictions[term] = target_restriction(self.model, self.target, term)
        return self._restrictions[term]


def target_restriction(model: EdmModel, target: OperationTarget, term: CapabilitiesTerm) -> Any:
    """Decoded restriction for ``term`` as it applies to ``target``."""
    nav = target.navigation_property
    if nav is not None and term is not CapabilitiesTerm.NAVIGATION_RESTRICTIONS:
        navigation = get_restriction(model, target.source, CapabilitiesTerm.NAVIGATION_RESTRICTIONS)
        restricted = navigation.find_restricted_property(nav.name)
        if restricted is not None and restricted.get(term) is not None:
            return restricted.get(term)
        return get_restriction(model, nav, term)
    return get_restriction(model, target.source, term)


PhaseFunction = Callable[[HandlerState], None]


def upper_first(name: str) -> str:
    return name[:1].upper() + name[1:]


def default_initialize(state: HandlerState) -> None:
    state.bind()


def default_basic_info(state: HandlerState) -> None:
    pass


def default_parameters(state: HandlerState) -> None:
    """Key parameters for targets addressed through an entity set key."""
    if state.target.is_keyed:
        state.operation.parameters.extend(create_key_parameters(state.model, state.source_type))


def default_request_body(state: HandlerState) -> None:
    pass


def default_responses(state: HandlerState) -> None:
    pass


def default_security(state: HandlerState) -> None:
    pass


def default_tags(state: HandlerState) -> None:
    target = state.target
    if target.navigation_property is not None:
        name = f"{target.source.name}.{upper_first(target.navigation_property.name)}"
    else:
        name = f"{target.source.name}.{state.source_type.name}"
    state.operation.tags.append(Tag(name=name))


def default_custom_parameters(state: HandlerState) -> None:
    pass


def default_finalize(state: HandlerState) -> None:
    logger.debug(
        f"Synthesized {state.operation_type.value.upper()} {state.target}: "
        f"{len(state.operation.parameters)} parameters, {len(state.operation.responses)} responses"
    )


DEFAULT_PHASES: Mapping[Phase, PhaseFunction] = MappingProxyType(
    {
        Phase.INITIALIZE: default_initialize,
        Phase.SET_BASIC_INFO: default_basic_info,
        Phase.SET_PARAMETERS: default_parameters,
        Phase.SET_REQUEST_BODY: default_request_body,
        Phase.SET_RESPONSES: default_responses,
        Phase.SET_SECURITY: default_security,
        Phase.SET_TAGS: default_tags,
        Phase.APPEND_CUSTOM_PARAMETERS: default_custom_parameters,
        Phase.FINALIZE: default_finalize,
    }
)


def _append_default_response(operation: Operation) -> None:
    operation.responses.pop(STATUS_DEFAULT, None)
    operation.responses[STATUS_DEFAULT] = default_error_response()


@dataclass(frozen=True)
class OperationHandler:
    """Builds operations for one (target kind, verb) combination.

    Attributes:
        target_kind: The kind of target this handler accepts.
        operation_type: The HTTP verb it builds.
        phases: Phase overrides; missing phases use ``DEFAULT_PHASES``.
    """

    target_kind: TargetKind
    operation_type: OperationType
    phases: Mapping[Phase, PhaseFunction] = field(default_factory=dict)

    def phase(self, phase: Phase) -> PhaseFunction:
        return self.phases.get(phase, DEFAULT_PHASES[phase])

    def synthesize(self, context: GenerationContext, target: OperationTarget) -> Operation:
        """Run every phase in ``PHASE_ORDER`` and return the operation.

        Raises:
            InvalidArgumentError: If ``context`` or ``target`` is None, or the
                target is of the wrong kind.
            SynthesisError: If a phase cannot resolve what it needs.
        """
        if context is None:
            raise InvalidArgumentError("context")
        if target is None:
            raise InvalidArgumentError("target")
        if target.kind is not self.target_kind:
            raise InvalidArgumentError(
                "target",
                f"Handler for {self.target_kind.value} cannot build {target.kind.value} operations",
            )

        state = HandlerState(
            operation_type=self.operation_type,
            pending_context=context,
            pending_target=target,
        )
        for phase in PHASE_ORDER:
            self.phase(phase)(state)
            if phase is Phase.SET_RESPONSES:
                _append_default_response(state.operation)

        return state.operation


__all__ = [
    "DEFAULT_PHASES",
    "HandlerState",
    "OperationHandler",
    "OperationTarget",
    "OperationType",
    "PHASE_ORDER",
    "Phase",
    "PhaseFunction",
    "TargetKind",
    "default_parameters",
    "default_tags",
    "target_restriction",
    "upper_first",
]
