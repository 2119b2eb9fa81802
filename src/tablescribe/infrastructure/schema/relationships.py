"""
Relationship resolution.

Merges a table's forward references and back-references into one map keyed
by related table name. The map is computed once per reflection and reused by
every join.
"""

from typing import Dict, List, Optional

from .models import Direction, Relationship, TableSchema

PRIMARY_CONSTRAINT = "PRIMARY"


def resolve_relationships(schema: TableSchema) -> Dict[str, List[Relationship]]:
    """
    Build the relationship map of a reflected table.

    Forward references become PULL relationships (this table holds the
    foreign key); back-references become PUSH relationships. Primary-key
    constraints and references without a target table are skipped.

    Example:
        >>> rels = resolve_relationships(schema)
        >>> rels["roles"]
        [Relationship(column='role_id', related_table='roles', related_column='id',
                      direction=<Direction.PULL: 'pull'>)]
    """
    relationships: Dict[str, List[Relationship]] = {}

    for column, ref in schema.references.items():
        if ref.constraint_name == PRIMARY_CONSTRAINT or not ref.table:
            continue
        relationships.setdefault(ref.table, []).append(
            Relationship(
                column=column,
                related_table=ref.table,
                related_column=ref.column,
                direction=Direction.PULL,
            )
        )

    for column, back_refs in schema.back_references.items():
        for back_ref in back_refs:
            if not back_ref.table:
                continue
            relationships.setdefault(back_ref.table, []).append(
                Relationship(
                    column=column,
                    related_table=back_ref.table,
                    related_column=back_ref.column,
                    direction=Direction.PUSH,
                )
            )

    return relationships


def filter_relationships(
    relationships: List[Relationship],
    pull: Optional[bool] = None,
    push: Optional[bool] = None,
) -> List[Relationship]:
    """
    Select relationships by direction.

    With neither flag given every relationship is kept. Otherwise PULL
    relationships are kept when ``pull`` is truthy and PUSH relationships
    when ``push`` is truthy.
    """
    if pull is None and push is None:
        return list(relationships)
    return [
        rel
        for rel in relationships
        if (rel.is_push and push) or (not rel.is_push and pull)
    ]
