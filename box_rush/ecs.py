"""
Entity-Component Store
=======================
Integer entity IDs with one component dictionary per dataclass type.

Entities are never destroyed during a session: enemy population only
grows, and the player and pickup are moved rather than recreated.
A session restart builds a fresh World.
"""

from typing import Dict, Type, TypeVar, Optional, Iterator, Tuple, Any


# Type variable for component types
C = TypeVar('C')


class World:
    """
    Holds every entity of one play session.

    Queries yield entities in creation order, so systems that resolve
    enemy-vs-enemy blocking always process enemies in the same order.
    """

    def __init__(self):
        self._next_entity_id: int = 0
        self._components: Dict[Type, Dict[int, Any]] = {}

    def create_entity(self, *components: Any) -> int:
        """Create a new entity, attach the given components, return its ID."""
        entity_id = self._next_entity_id
        self._next_entity_id += 1
        for component in components:
            self.add_component(entity_id, component)
        return entity_id

    def add_component(self, entity_id: int, component: Any) -> None:
        """Attach a component, replacing any existing one of the same type."""
        self._components.setdefault(type(component), {})[entity_id] = component

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        """Get a component for an entity, or None if not found."""
        store = self._components.get(component_type)
        if store is None:
            return None
        return store.get(entity_id)

    def has_component(self, entity_id: int, component_type: Type) -> bool:
        store = self._components.get(component_type)
        return store is not None and entity_id in store

    def query(self, *component_types: Type) -> Iterator[Tuple[Any, ...]]:
        """
        Yield (entity_id, component1, component2, ...) for every entity
        that has ALL of the requested component types.
        """
        if not component_types:
            return

        stores = []
        for component_type in component_types:
            store = self._components.get(component_type)
            if not store:
                return
            stores.append(store)

        # Smallest store drives the scan
        candidates = set(min(stores, key=len))
        for store in stores:
            candidates.intersection_update(store)

        for entity_id in sorted(candidates):
            yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def single(self, component_type: Type) -> Optional[int]:
        """Return the first entity carrying a marker component, if any."""
        for entity_id, _ in self.query(component_type):
            return entity_id
        return None

    def count(self, component_type: Type) -> int:
        """Number of entities carrying the given component type."""
        return len(self._components.get(component_type, ()))

    def entity_count(self) -> int:
        return self._next_entity_id
