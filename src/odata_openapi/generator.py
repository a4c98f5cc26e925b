"""OpenAPI document generator.

Walks the entity container and asks the operation handlers for every
operation the capability restrictions allow. A target whose operation cannot
be synthesized is logged, recorded in :attr:`ODataOpenAPIGenerator.failures`
and left out of the document; the remaining targets are still generated.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import yaml

from odata_openapi.capabilities.catalog import get_restriction
from odata_openapi.capabilities.restrictions import (
    DeleteRestrictions,
    InsertRestrictions,
    KeyAsSegmentSupported,
    NavigationRestrictions,
    ReadRestrictions,
    UpdateRestrictions,
)
from odata_openapi.capabilities.terms import CapabilitiesTerm
from odata_openapi.edm.model import EdmModel, EntitySet, EntityType, NavigationSource, Singleton
from odata_openapi.errors import InvalidArgumentError, SynthesisError
from odata_openapi.openapi import ERROR_RESPONSE_NAME
from odata_openapi.operation.context import GenerationContext
from odata_openapi.operation.handlers import synthesize_operation
from odata_openapi.operation.pipeline import OperationTarget, OperationType, target_restriction
from odata_openapi.schemas import entity_type_schema, error_response_component, error_schema
from odata_openapi.settings import GeneratorSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationFailure:
    """A target that was skipped because synthesis failed."""

    path: str
    operation_type: OperationType
    error: SynthesisError

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "method": self.operation_type.value,
            "error": self.error.to_dict(),
        }


class ODataOpenAPIGenerator:
    """Builds an OpenAPI 3.0 document from an EDM model.

    Example:
        >>> generator = ODataOpenAPIGenerator(load_model("service.yaml"))
        >>> document = generator.generate()
        >>> print(generator.to_yaml())
    """

    def __init__(self, model: EdmModel, settings: GeneratorSettings | None = None) -> None:
        if model is None:
            raise InvalidArgumentError("model")
        self.model = model
        self.context = GenerationContext.create(model, settings)
        self.failures: list[GenerationFailure] = []
        self._tags: dict[str, None] = {}

    @property
    def settings(self) -> GeneratorSettings:
        return self.context.settings

    @property
    def key_as_segment(self) -> bool:
        """True when key values are addressed as path segments."""
        if self.settings.enable_key_as_segment:
            return True
        restriction: KeyAsSegmentSupported = get_restriction(
            self.model, self.model.container, CapabilitiesTerm.KEY_AS_SEGMENT_SUPPORTED
        )
        return restriction.supported

    def generate(self) -> dict[str, Any]:
        """Build the full document. Failures from earlier runs are cleared."""
        self.failures = []
        self._tags = {}

        paths = self.build_paths()
        document: dict[str, Any] = {
            "openapi": self.settings.openapi_version,
            "info": self.build_info(),
            "servers": [{"url": self.settings.service_root}],
            "paths": paths,
            "components": self.build_components(),
        }
        if self._tags:
            document["tags"] = [{"name": name} for name in self._tags]

        if self.failures:
            logger.warning(f"Generated document with {len(self.failures)} skipped operation(s)")
        return document

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.generate(), sort_keys=False, allow_unicode=True)

    def to_json(self) -> str:
        return json.dumps(self.generate(), indent=2)

    def build_info(self) -> dict[str, Any]:
        container = self.model.container
        return {
            "title": f"OData Service for namespace {container.namespace}",
            "description": f"This OData service is located at {self.settings.service_root}",
            "version": self.settings.document_version,
        }

    def build_components(self) -> dict[str, Any]:
        schemas: dict[str, Any] = {
            full_name: entity_type_schema(entity_type)
            for full_name, entity_type in sorted(self.model.entity_types.items())
        }
        schemas["odata.error"] = error_schema()

        components: dict[str, Any] = {
            "schemas": schemas,
            "responses": {ERROR_RESPONSE_NAME: error_response_component()},
        }
        if len(self.context.security):
            components["securitySchemes"] = self.context.security.to_components()
        return components

    # Paths

    def build_paths(self) -> dict[str, dict[str, Any]]:
        paths: dict[str, dict[str, Any]] = {}
        container = self.model.container

        for entity_set in container.entity_sets:
            self._add_entity_set_paths(paths, entity_set)
        for singleton in container.singletons:
            self._add_singleton_paths(paths, singleton)

        return paths

    def entity_path(self, entity_set: EntitySet) -> str | None:
        """``/Set({Id})``, ``/Set(A={A},B={B})`` or ``/Set/{Id}``."""
        entity_type = self.model.get_declared_type(entity_set)
        if entity_type is None:
            return None
        keys = [prop.name for prop in self.model.get_key(entity_type)]
        if not keys:
            return None
        # key-as-segment only addresses single-part keys
        if self.key_as_segment and len(keys) == 1:
            return f"/{entity_set.name}/{{{keys[0]}}}"
        if len(keys) == 1:
            return f"/{entity_set.name}({{{keys[0]}}})"
        segments = ",".join(f"{key}={{{key}}}" for key in keys)
        return f"/{entity_set.name}({segments})"

    def _add_entity_set_paths(self, paths: dict[str, dict[str, Any]], entity_set: EntitySet) -> None:
        collection = OperationTarget.entity_set(entity_set)
        read: ReadRestrictions = target_restriction(self.model, collection, CapabilitiesTerm.READ_RESTRICTIONS)
        insert: InsertRestrictions = target_restriction(self.model, collection, CapabilitiesTerm.INSERT_RESTRICTIONS)

        collection_path = f"/{entity_set.name}"
        verbs = []
        if read.readable:
            verbs.append(OperationType.GET)
        if insert.insertable:
            verbs.append(OperationType.POST)
        self._add_operations(paths, collection_path, collection, verbs)

        entity_path = self.entity_path(entity_set)
        if entity_path is None:
            logger.warning(f"Entity set '{entity_set.name}' has no resolvable key; skipping entity paths")
            return

        entity = OperationTarget.entity(entity_set)
        update: UpdateRestrictions = target_restriction(self.model, entity, CapabilitiesTerm.UPDATE_RESTRICTIONS)
        delete: DeleteRestrictions = target_restriction(self.model, entity, CapabilitiesTerm.DELETE_RESTRICTIONS)

        verbs = []
        if read.for_single_entity().readable:
            verbs.append(OperationType.GET)
        if update.updatable:
            verbs.append(OperationType.PUT if update.is_update_method_put else OperationType.PATCH)
        if delete.deletable:
            verbs.append(OperationType.DELETE)
        self._add_operations(paths, entity_path, entity, verbs)

        self._add_navigation_paths(paths, entity_set, entity_path)

    def _add_singleton_paths(self, paths: dict[str, dict[str, Any]], singleton: Singleton) -> None:
        target = OperationTarget.singleton(singleton)
        read: ReadRestrictions = target_restriction(self.model, target, CapabilitiesTerm.READ_RESTRICTIONS)
        update: UpdateRestrictions = target_restriction(self.model, target, CapabilitiesTerm.UPDATE_RESTRICTIONS)

        path = f"/{singleton.name}"
        verbs = []
        if read.readable:
            verbs.append(OperationType.GET)
        if update.updatable:
            verbs.append(OperationType.PUT if update.is_update_method_put else OperationType.PATCH)
        self._add_operations(paths, path, target, verbs)

        self._add_navigation_paths(paths, singleton, path)

    def _add_navigation_paths(
        self,
        paths: dict[str, dict[str, Any]],
        source: NavigationSource,
        source_path: str,
    ) -> None:
        entity_type: EntityType | None = self.model.get_declared_type(source)
        if entity_type is None:
            return

        navigation: NavigationRestrictions = get_restriction(
            self.model, source, CapabilitiesTerm.NAVIGATION_RESTRICTIONS
        )
        for nav in entity_type.navigation_properties:
            if not navigation.is_navigable(nav.name):
                logger.debug(f"Navigation to {source.name}/{nav.name} is restricted; skipping")
                continue
            target = OperationTarget.navigation(source, nav)
            read: ReadRestrictions = target_restriction(self.model, target, CapabilitiesTerm.READ_RESTRICTIONS)
            if read.readable:
                self._add_operations(paths, f"{source_path}/{nav.name}", target, [OperationType.GET])

    def _add_operations(
        self,
        paths: dict[str, dict[str, Any]],
        path: str,
        target: OperationTarget,
        verbs: list[OperationType],
    ) -> None:
        item: dict[str, Any] = {}
        for verb in verbs:
            try:
                operation = synthesize_operation(self.context, target, verb)
            except SynthesisError as e:
                logger.warning(f"Skipping {verb.value.upper()} {path}: {e}")
                self.failures.append(GenerationFailure(path=path, operation_type=verb, error=e))
                continue
            for tag in operation.tags:
                self._tags.setdefault(tag.name, None)
            item[verb.value] = operation.to_dict()

        if item:
            paths[path] = item


def generate_document(model: EdmModel, settings: GeneratorSettings | None = None) -> dict[str, Any]:
    """Convenience wrapper around :class:`ODataOpenAPIGenerator`."""
    return ODataOpenAPIGenerator(model, settings).generate()


__all__ = ["GenerationFailure", "ODataOpenAPIGenerator", "generate_document"]
