"""
Typed pipeline: an ordered list of stages over a row shape, checked as it is composed.

A pipeline starts from a root model and a set of its columns. Each stage
declares the fields it requires and returns a new RowSet with the fields,
joins, filters or ordering it adds. Requiring a field that no earlier stage
produced fails at composition time, before anything reaches the store.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.sql import Select

# Never selectable by any pipeline
INTERNAL_FIELDS = frozenset({"password_hash", "refresh_token"})

# Separator between a nested object name and its member, e.g. owner_details__username
NEST = "__"


class PipelineCompositionError(ValueError):
    """Stage sequence is not well formed"""


class Join(NamedTuple):
    target: Any
    onclause: Any
    outer: bool


def _leaf(name: str) -> str:
    return name.rsplit(NEST, 1)[-1]


def check_public(names: Iterable[str]) -> None:
    internal = [n for n in names if _leaf(n) in INTERNAL_FIELDS]
    if internal:
        raise PipelineCompositionError(f"Internal fields cannot be selected: {internal}")


@dataclass(frozen=True)
class RowSet:
    """In-flight row shape: named column expressions plus the clauses built so far"""
    root: Any
    fields: Dict[str, Any]
    joins: Tuple[Join, ...] = ()
    criteria: Tuple[Any, ...] = ()
    ordering: Tuple[Any, ...] = ()
    projection: Optional[Tuple[str, ...]] = None

    def add_fields(self, new: Dict[str, Any]) -> "RowSet":
        clash = [n for n in new if n in self.fields]
        if clash:
            raise PipelineCompositionError(f"Fields already present: {clash}")
        check_public(new)
        return replace(self, fields={**self.fields, **new})

    def add_join(self, target: Any, onclause: Any, outer: bool = True) -> "RowSet":
        return replace(self, joins=self.joins + (Join(target, onclause, outer),))

    def add_criteria(self, *criteria: Any) -> "RowSet":
        return replace(self, criteria=self.criteria + criteria)


class Pipeline:
    """Ordered stage list for one read use case"""

    def __init__(self, name: str, root: Any, fields: Sequence[str]):
        check_public(fields)
        self.name = name
        self.stages: List[Any] = []
        self._rows = RowSet(root=root, fields={f: getattr(root, f) for f in fields})

    def __repr__(self) -> str:
        return f"<Pipeline {self.name} stages={len(self.stages)}>"

    @property
    def fields(self) -> Tuple[str, ...]:
        """Fields available to the next stage, or the final output fields once projected"""
        if self._rows.projection is not None:
            return self._rows.projection
        return tuple(self._rows.fields)

    @property
    def is_sorted(self) -> bool:
        return bool(self._rows.ordering)

    @property
    def rows(self) -> RowSet:
        return self._rows

    def has_field(self, name: str) -> bool:
        """A plain field, or a nested object with at least one member"""
        fields = self._rows.fields
        return name in fields or any(f.startswith(name + NEST) for f in fields)

    def then(self, stage: Any) -> "Pipeline":
        if self._rows.projection is not None:
            raise PipelineCompositionError(f"{self.name}: {stage!r} follows the final projection")

        missing = [f for f in stage.requires if not self.has_field(f)]
        if missing:
            raise PipelineCompositionError(
                f"{self.name}: {stage!r} requires fields not produced by earlier stages: {missing}"
            )

        self._rows = stage.apply(self._rows)
        self.stages.append(stage)
        return self

    def extend(self, *stages: Any) -> "Pipeline":
        for stage in stages:
            self.then(stage)
        return self

    def statement(self) -> Select:
        """Compile the stages into a single SELECT"""
        rows = self._rows
        names = rows.projection if rows.projection is not None else tuple(rows.fields)

        stmt = select(*(rows.fields[n].label(n) for n in names)).select_from(rows.root)
        for join in rows.joins:
            stmt = stmt.join(join.target, join.onclause, isouter=join.outer)
        if rows.criteria:
            stmt = stmt.where(*rows.criteria)
        if rows.ordering:
            stmt = stmt.order_by(*rows.ordering)
        return stmt
