"""
Join-stage library.

Each stage is a small immutable object: `requires` names the fields it reads,
`apply` returns a new RowSet. Related-row counts and viewer flags are
correlated subqueries over a private alias, so every row is evaluated on its
own and nested counts cannot leak between rows.
"""
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Callable, FrozenSet, Iterable, Mapping, Optional, Sequence

from sqlalchemy import func, literal, select
from sqlalchemy.orm import aliased

from core.models import User
from readmodel.pipeline import NEST, PipelineCompositionError, RowSet

# Fields of a user that may appear inside any other entity's view
PUBLIC_USER_FIELDS = ("id", "username", "full_name", "avatar")

SORT_DIRECTIONS = ("asc", "desc")

Criterion = Callable[[Mapping[str, Any]], Any]


class Stage(ABC):
    """One transform step in a pipeline"""

    requires: FrozenSet[str] = frozenset()

    @abstractmethod
    def apply(self, rows: RowSet) -> RowSet:
        """Return the row shape after this stage"""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({getattr(self, 'name', '')})"


class Match(Stage):
    """Filter rows with a criterion built from existing fields"""

    def __init__(self, criterion: Criterion, requires: Iterable[str], name: str = "match"):
        self.criterion = criterion
        self.requires = frozenset(requires)
        self.name = name

    def apply(self, rows: RowSet) -> RowSet:
        return rows.add_criteria(self.criterion(rows.fields))

    @classmethod
    def equals(cls, field: str, value: Any) -> "Match":
        return cls(lambda f: f[field] == value, {field}, name=f"{field}==")

    @classmethod
    def iequals(cls, field: str, value: str) -> "Match":
        """Case-insensitive exact match"""
        return cls(lambda f: func.lower(f[field]) == value.lower(), {field}, name=f"{field}~=")

    @classmethod
    def contains(cls, field: str, text: str) -> "Match":
        """Case-insensitive substring; LIKE wildcards in text are matched literally"""
        return cls(
            lambda f: func.lower(f[field]).contains(text.lower(), autoescape=True),
            {field},
            name=f"{field}*="
        )

    @classmethod
    def is_true(cls, field: str) -> "Match":
        return cls(lambda f: f[field].is_(True), {field}, name=f"{field}?")

    @classmethod
    def not_null(cls, field: str) -> "Match":
        return cls(lambda f: f[field].is_not(None), {field}, name=f"{field}!")


class AttachOne(Stage):
    """
    Resolve a foreign key to zero or one row of `model`, exposing
    `<name>__<column>` for each requested column.

    With required=False a missing row leaves the fields null (outer join);
    with required=True the parent row is dropped.
    """

    def __init__(self, name: str, foreign_key: str, model: Any, fields: Sequence[str],
                 required: bool = False):
        self.name = name
        self.foreign_key = foreign_key
        self.model = model
        self.columns = tuple(fields)
        self.required = required
        self.requires = frozenset({foreign_key})

    def apply(self, rows: RowSet) -> RowSet:
        target = aliased(self.model, name=self.name)
        onclause = target.id == rows.fields[self.foreign_key]
        rows = rows.add_join(target, onclause, outer=not self.required)
        return rows.add_fields({
            f"{self.name}{NEST}{column}": getattr(target, column) for column in self.columns
        })


class AttachOwner(AttachOne):
    """AttachOne over users, public fields only"""

    def __init__(self, name: str, foreign_key: str, required: bool = False,
                 fields: Sequence[str] = PUBLIC_USER_FIELDS):
        extra = [f for f in fields if f not in PUBLIC_USER_FIELDS]
        if extra:
            raise PipelineCompositionError(f"Owner summary may only expose public fields, got {extra}")
        super().__init__(name, foreign_key, User, fields, required=required)


class AttachRelatedCount(Stage):
    """Integer count of `model` rows whose `match_attr` equals field `key`"""

    def __init__(self, name: str, model: Any, match_attr: str, key: str = "id",
                 where: Optional[Callable[[Any], Any]] = None):
        self.name = name
        self.model = model
        self.match_attr = match_attr
        self.key = key
        self.where = where
        self.requires = frozenset({key})

    def apply(self, rows: RowSet) -> RowSet:
        related = aliased(self.model)
        stmt = (
            select(func.count())
            .select_from(related)
            .where(getattr(related, self.match_attr) == rows.fields[self.key])
        )
        if self.where is not None:
            stmt = stmt.where(self.where(related))
        return rows.add_fields({self.name: stmt.correlate_except(related).scalar_subquery()})


class AttachViewerFlag(Stage):
    """
    Boolean: does a `model` row link field `key` (via match_attr) to the viewer
    (via viewer_attr)? Always false for an anonymous viewer.
    """

    def __init__(self, name: str, model: Any, match_attr: str, viewer_attr: str,
                 viewer_id: Optional[str], key: str = "id"):
        self.name = name
        self.model = model
        self.match_attr = match_attr
        self.viewer_attr = viewer_attr
        self.viewer_id = viewer_id
        self.key = key
        self.requires = frozenset({key})

    def apply(self, rows: RowSet) -> RowSet:
        if self.viewer_id is None:
            return rows.add_fields({self.name: literal(False)})

        related = aliased(self.model)
        flag = (
            select(related.id)
            .where(
                getattr(related, self.match_attr) == rows.fields[self.key],
                getattr(related, self.viewer_attr) == self.viewer_id,
            )
            .correlate_except(related)
            .exists()
        )
        return rows.add_fields({self.name: flag})


class AttachLatest(Stage):
    """Most recent `model` row related to field `key`, as `<name>__<column>` (outer join)"""

    def __init__(self, name: str, model: Any, match_attr: str, key: str, fields: Sequence[str],
                 order_attr: str = "created_at", where: Optional[Callable[[Any], Any]] = None):
        self.name = name
        self.model = model
        self.match_attr = match_attr
        self.key = key
        self.columns = tuple(fields)
        self.order_attr = order_attr
        self.where = where
        self.requires = frozenset({key})

    def apply(self, rows: RowSet) -> RowSet:
        target = aliased(self.model, name=self.name)
        inner = aliased(self.model)

        latest = select(inner.id).where(getattr(inner, self.match_attr) == rows.fields[self.key])
        if self.where is not None:
            latest = latest.where(self.where(inner))
        latest = (
            latest.order_by(getattr(inner, self.order_attr).desc(), inner.id.desc())
            .limit(1)
            .correlate_except(inner)
            .scalar_subquery()
        )

        rows = rows.add_join(target, target.id == latest, outer=True)
        return rows.add_fields({
            f"{self.name}{NEST}{column}": getattr(target, column) for column in self.columns
        })


class Derive(Stage):
    """Arbitrary derived field computed from fields produced earlier"""

    def __init__(self, name: str, build: Callable[[Mapping[str, Any]], Any], requires: Iterable[str]):
        self.name = name
        self.build = build
        self.requires = frozenset(requires)

    def apply(self, rows: RowSet) -> RowSet:
        return rows.add_fields({self.name: self.build(rows.fields)})


class Sort(Stage):
    """Order by one field, then by root id in the same direction so the order is total"""

    def __init__(self, field: str, direction: str = "desc"):
        if direction not in SORT_DIRECTIONS:
            raise PipelineCompositionError(f"Sort direction must be one of {SORT_DIRECTIONS}, got {direction!r}")
        self.name = f"{field} {direction}"
        self.field = field
        self.direction = direction
        self.requires = frozenset({field})

    def apply(self, rows: RowSet) -> RowSet:
        if rows.ordering:
            raise PipelineCompositionError("Pipeline is already sorted")

        def order(column):
            return column.asc() if self.direction == "asc" else column.desc()

        ordering = (order(rows.fields[self.field]),)
        if self.field != "id":
            ordering += (order(rows.root.id),)
        return replace(rows, ordering=ordering)


class Project(Stage):
    """Final output fields; a nested object name (e.g. "owner") keeps all its members"""

    def __init__(self, *fields: str):
        self.name = ",".join(fields)
        self.fields = tuple(fields)
        self.requires = frozenset(fields)

    def apply(self, rows: RowSet) -> RowSet:
        names = []
        for name in self.fields:
            if name in rows.fields:
                names.append(name)
            else:
                # a nested object name selects all of its members
                names.extend(f for f in rows.fields if f.startswith(name + NEST))
        return replace(rows, projection=tuple(names))
