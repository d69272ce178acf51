"""Write operations accepted by the Write Batcher.

BatchOperation is a tagged union of three variants, discriminated by ``type``:

- PutOperation: create or replace an item
- DeleteOperation: delete the item at a key
- PkChangeOperation: move an item to a new primary key (delete + put, atomically)

Example:
    operations = TypeAdapter(list[BatchOperation]).validate_python(
        [
            {"type": "put", "tableName": "users", "item": {"id": "1", "name": "Homer"}},
            {"type": "delete", "tableName": "users", "key": {"id": "2"}},
        ]
    )
"""

from typing import Annotated, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dynamodesk.keys import DynamoDBKey, Item, WriteRequest


class _Operation(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    table_name: str


class PutOperation(_Operation):
    type: Literal["put"] = "put"
    item: Item

    def to_write_request(self) -> WriteRequest:
        return {"PutRequest": {"Item": self.item}}


class DeleteOperation(_Operation):
    type: Literal["delete"] = "delete"
    key: DynamoDBKey

    def to_write_request(self) -> WriteRequest:
        return {"DeleteRequest": {"Key": self.key}}


class PkChangeOperation(_Operation):
    """Replace the item at old_key with new_item, whose key differs."""

    type: Literal["pk-change"] = "pk-change"
    old_key: DynamoDBKey
    new_item: Item


BatchOperation: TypeAlias = Annotated[
    PutOperation | DeleteOperation | PkChangeOperation,
    Field(discriminator="type"),
]


class WriteProgress(BaseModel):
    """Progress event emitted after each internal write batch."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    kind: Literal["write-progress"] = "write-progress"
    processed: int
    total: int


class WriteOutcome(BaseModel):
    """Result of a batch write.

    Attributes:
        success: True when no error was recorded.
        processed: Number of operations durably applied.
        errors: One human-readable message per failed operation (or per group of
            operations left unprocessed after the last retry).

    """

    success: bool
    processed: int
    errors: list[str] = Field(default_factory=list)


__all__ = [
    "BatchOperation",
    "DeleteOperation",
    "PkChangeOperation",
    "PutOperation",
    "WriteOutcome",
    "WriteProgress",
]
