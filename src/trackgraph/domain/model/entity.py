"""
Base building blocks:
identity and the entity_type contract.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from trackgraph.domain.model.enums import EntityType


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain."""

    id: UUID = field(default_factory=new_id)

    # class-level discriminator; subclasses must override
    ENTITY_TYPE: ClassVar[EntityType]

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE
