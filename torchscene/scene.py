"""Entity registry, entity handles and scenes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, TypeVar

from torchscene.components import (
    EntityType,
    EntityTypeComponent,
    LabelComponent,
    ModelComponent,
    TransformComponent,
    UUIDComponent,
)

C = TypeVar("C")


class Registry:
    """Stores entities and at most one component of each type per entity."""

    def __init__(self) -> None:
        self._components: dict[int, dict[type, Any]] = {}
        self._next_id = 0

    def _storage(self, entity: int | None) -> dict[type, Any]:
        try:
            return self._components[entity]
        except KeyError:
            raise KeyError(f"invalid entity: {entity!r}") from None

    def create(self) -> int:
        """Create a new entity with no components and return its id."""
        entity = self._next_id
        self._next_id += 1
        self._components[entity] = {}
        return entity

    def destroy(self, entity: int) -> None:
        """Delete an entity and all its components."""
        self._storage(entity)
        del self._components[entity]

    def emplace(self, entity: int, component: C) -> C:
        """Attach ``component``; an entity may hold only one of each type."""
        storage = self._storage(entity)
        key = type(component)
        if key in storage:
            raise ValueError(f"entity {entity} already has a {key.__name__}")
        storage[key] = component
        return component

    def has(self, entity: int, component_type: type) -> bool:
        return component_type in self._storage(entity)

    def get(self, entity: int, component_type: type[C]) -> C:
        try:
            return self._storage(entity)[component_type]
        except KeyError:
            raise KeyError(f"entity {entity} has no {component_type.__name__}") from None

    def remove(self, entity: int, component_type: type) -> bool:
        """Detach a component; returns whether there was one."""
        return self._storage(entity).pop(component_type, None) is not None

    def entities(self) -> Iterator[int]:
        """Ids of all live entities, in creation order."""
        yield from list(self._components)

    def __contains__(self, entity: object) -> bool:
        return entity in self._components

    def __len__(self) -> int:
        return len(self._components)


@dataclass(frozen=True)
class Entity:
    """Lightweight handle to an entity inside a scene; ``entity_id`` None is the null entity."""

    entity_id: int | None
    scene: Scene | None = field(default=None, compare=False, repr=False)
    entity_type: EntityType = field(default=EntityType.GENERAL, compare=False)

    @property
    def _registry(self) -> Registry:
        if self.scene is None:
            raise RuntimeError("entity is not bound to a scene")
        return self.scene.registry

    def add_component(self, component: Any) -> bool:
        """Attach ``component``; returns False if one of its type is already attached."""
        if self.has_component(type(component)):
            return False
        self._registry.emplace(self.entity_id, component)
        return True

    def has_component(self, component_type: type) -> bool:
        return self._registry.has(self.entity_id, component_type)

    def get_component(self, component_type: type[C]) -> C:
        return self._registry.get(self.entity_id, component_type)

    def remove_component(self, component_type: type) -> bool:
        return self._registry.remove(self.entity_id, component_type)

    def is_null(self) -> bool:
        return self.entity_id is None

    def __int__(self) -> int:
        if self.entity_id is None:
            raise ValueError("the null entity has no id")
        return self.entity_id


class Scene:
    """A registry of entities plus the current selection."""

    def __init__(self) -> None:
        self.registry = Registry()
        self.selected_entity_id: int | None = None
        self.general_entity_ids: list[int] = []
        self.light_entity_ids: list[int] = []

    def create_entity(self, name: str = "entity", entity_type: EntityType = EntityType.GENERAL) -> Entity:
        """Create an entity carrying identity, label, type, model and transform components."""
        entity = Entity(self.registry.create(), self)
        entity.add_component(UUIDComponent())
        entity.add_component(LabelComponent(name))
        entity.add_component(EntityTypeComponent(entity_type))
        entity.add_component(ModelComponent())
        entity.add_component(TransformComponent())
        return entity

    def remove_entity(self, entity: Entity) -> None:
        """Destroy an entity, clearing the selection if it was selected."""
        self.registry.destroy(entity.entity_id)
        if self.selected_entity_id == entity.entity_id:
            self.reset_selection()

    def select(self, entity: Entity | int) -> None:
        self.selected_entity_id = entity.entity_id if isinstance(entity, Entity) else entity

    def reset_selection(self) -> None:
        self.selected_entity_id = None