"""
Entity collaborator.

Tables map fetched rows into entities and read entities back when writing.
Any object satisfying the ``Entity`` protocol can serve as a model prototype;
``Row`` is the default implementation, a pydantic model that accepts arbitrary
column attributes.
"""

from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    List,
    Mapping,
    Optional,
    Protocol,
    runtime_checkable,
)

from pydantic import BaseModel, ConfigDict, PrivateAttr

from tablescribe.infrastructure.schema.models import Relationship

if TYPE_CHECKING:
    from tablescribe.table.core import Table


@runtime_checkable
class Entity(Protocol):
    """Protocol for objects a Table can populate and persist."""

    def to_dict(self) -> Dict[str, Any]:
        ...

    def populate(self, values: Mapping[str, Any]) -> None:
        ...

    def pre_save(self) -> None:
        ...

    def post_fetch(self) -> None:
        ...

    def set_relationships(self, relationships: Dict[str, List[Relationship]]) -> None:
        ...

    def get_relationship(self, table: str) -> List[Relationship]:
        ...

    def set_table(self, table: "Table") -> None:
        ...


class Row(BaseModel):
    """
    Generic entity holding one row's columns as attributes.

    Attributes are the camel-cased column aliases produced by the result
    mapper, so ``user_name`` is read back as ``row.userName``.

    Example:
        >>> row = Row()
        >>> row.populate({"id": "a1", "userName": "alice"})
        >>> row.userName
        'alice'
        >>> row.to_dict()
        {'id': 'a1', 'userName': 'alice'}
    """

    model_config = ConfigDict(extra="allow")

    _relationships: Dict[str, List[Relationship]] = PrivateAttr(default_factory=dict)
    _table: Any = PrivateAttr(default=None)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    def populate(self, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            setattr(self, key, value)

    def pre_save(self) -> None:
        """Hook run before the row is written."""

    def post_fetch(self) -> None:
        """Hook run after the row is populated from a result."""

    def set_relationships(self, relationships: Dict[str, List[Relationship]]) -> None:
        self._relationships = dict(relationships)

    def get_relationship(self, table: str) -> List[Relationship]:
        return list(self._relationships.get(table, []))

    def set_table(self, table: "Table") -> None:
        self._table = table

    @property
    def table(self) -> Optional["Table"]:
        return self._table
