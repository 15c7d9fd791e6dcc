"""Request and response models shared by the routes."""

from pydantic import BaseModel, Field

from ...models import Asset, Log, TextLong


class NotesModel(BaseModel):
    """Long text value."""

    value: str
    format: str = "plain_text"


class AssetCreateRequest(BaseModel):
    """Request model for creating an asset."""

    type: str = Field(min_length=1)
    name: str = ""
    status: str | None = None


class AssetResponse(BaseModel):
    """Response model for asset."""

    id: int
    type: str
    name: str
    status: str
    created: int

    @classmethod
    def from_asset(cls, asset: Asset) -> "AssetResponse":
        return cls(
            id=asset.id,
            type=asset.type,
            name=asset.name,
            status=asset.status,
            created=asset.created,
        )


class LogCreateRequest(BaseModel):
    """Request model for creating a log. Omitted status gets the type default."""

    type: str = Field(min_length=1)
    timestamp: int | None = None
    status: str | None = None
    name: str = ""
    asset: list[int] = Field(default_factory=list)
    notes: NotesModel | None = None

    def to_fields(self) -> dict:
        fields = self.model_dump(exclude={"notes"})
        if self.notes is not None:
            fields["notes"] = TextLong(self.notes.value, self.notes.format)
        return fields


class LogResponse(BaseModel):
    """Response model for log."""

    id: int
    type: str
    timestamp: int
    status: str | None
    name: str
    asset: list[int]
    notes: NotesModel | None = None

    @classmethod
    def from_log(cls, log: Log) -> "LogResponse":
        return cls(
            id=log.id,
            type=log.type,
            timestamp=log.timestamp,
            status=log.status,
            name=log.name,
            asset=list(log.asset),
            notes=(
                NotesModel(value=log.notes.value, format=log.notes.format)
                if log.notes
                else None
            ),
        )
