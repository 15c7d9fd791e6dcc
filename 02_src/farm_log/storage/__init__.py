"""Storage module."""

from .query import ENTITY_TYPES, EntityQuery, EntityTypeDefinition, ReferenceField
from .storage import AccessPolicy, IStorage, Storage

__all__ = [
    "AccessPolicy",
    "ENTITY_TYPES",
    "EntityQuery",
    "EntityTypeDefinition",
    "IStorage",
    "ReferenceField",
    "Storage",
]
