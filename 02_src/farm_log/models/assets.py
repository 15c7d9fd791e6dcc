"""Asset data models."""

import time
from dataclasses import dataclass, field
from typing import ClassVar


@dataclass
class Asset:
    """A tracked resource (land, equipment, animal, plant) that logs may reference."""

    entity_type: ClassVar[str] = "asset"

    type: str
    name: str = ""
    status: str = "active"
    created: int = field(default_factory=lambda: int(time.time()))
    id: int | None = None  # assigned on first save
