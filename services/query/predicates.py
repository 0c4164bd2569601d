"""
Predicate trees for content and pool filtering.

Search compilation builds one of these trees instead of concatenating SQL;
services.query.sql lowers a tree into a parameterised SQLite WHERE clause and
evaluate() runs the same tree against plain Python records, so filters can be
checked without a database.

Node types:
    And / Or / Not          boolean structure
    Compare                 column <op> literal
    IsTrue                  boolean column is set
    InSet                   column value is one of a finite set
    TagCoverage             post is associated with all (or any) of some tags

TRUE is the empty And and FALSE the empty Or; all_of/any_of/negate build
trees with those identities folded away.
"""

import operator
from dataclasses import dataclass
from typing import Any, FrozenSet, Iterable, Mapping, Tuple


@dataclass(frozen=True)
class Column:
    """A column of a logical table ('post' or 'pool')."""
    table: str
    name: str

    def __str__(self):
        return f"{self.table}.{self.name}"


class Predicate:
    """Base class for every node."""
    __slots__ = ()


@dataclass(frozen=True)
class And(Predicate):
    children: Tuple[Predicate, ...] = ()


@dataclass(frozen=True)
class Or(Predicate):
    children: Tuple[Predicate, ...] = ()


@dataclass(frozen=True)
class Not(Predicate):
    child: Predicate


@dataclass(frozen=True)
class Compare(Predicate):
    column: Column
    op: str
    value: Any

    def __post_init__(self):
        if self.op not in COMPARISON_OPERATORS:
            raise ValueError(f"Unsupported comparison operator: {self.op}")


@dataclass(frozen=True)
class IsTrue(Predicate):
    column: Column


@dataclass(frozen=True)
class InSet(Predicate):
    column: Column
    values: FrozenSet[Any]


@dataclass(frozen=True)
class TagCoverage(Predicate):
    """
    require_all=True: the post is associated with every tag in names.
    require_all=False: the post is associated with at least one of them.

    names are normalized tag names.
    """
    names: FrozenSet[str]
    require_all: bool = True


COMPARISON_OPERATORS = {
    '=': operator.eq,
    '!=': operator.ne,
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
}

TRUE = And(())
FALSE = Or(())


def all_of(*predicates: Predicate) -> Predicate:
    """Conjunction with nested Ands flattened and TRUE/FALSE folded."""
    children = []
    for predicate in predicates:
        if predicate == FALSE:
            return FALSE
        if isinstance(predicate, And):
            children.extend(predicate.children)
        else:
            children.append(predicate)
    if len(children) == 1:
        return children[0]
    return And(tuple(children))


def any_of(*predicates: Predicate) -> Predicate:
    """Disjunction with nested Ors flattened and TRUE/FALSE folded."""
    children = []
    for predicate in predicates:
        if predicate == TRUE:
            return TRUE
        if isinstance(predicate, Or):
            children.extend(predicate.children)
        else:
            children.append(predicate)
    if len(children) == 1:
        return children[0]
    return Or(tuple(children))


def negate(predicate: Predicate) -> Predicate:
    if predicate == TRUE:
        return FALSE
    if predicate == FALSE:
        return TRUE
    if isinstance(predicate, Not):
        return predicate.child
    return Not(predicate)


def in_set(column: Column, values: Iterable[Any]) -> InSet:
    return InSet(column, frozenset(values))


def evaluate(predicate: Predicate, record: Mapping[str, Any]) -> bool:
    """
    Evaluate a tree against one record.

    The record maps column names to values (the table part of a Column is
    ignored) and carries the post's normalized tag names under 'tag_names'.
    """
    if isinstance(predicate, And):
        return all(evaluate(child, record) for child in predicate.children)
    if isinstance(predicate, Or):
        return any(evaluate(child, record) for child in predicate.children)
    if isinstance(predicate, Not):
        return not evaluate(predicate.child, record)
    if isinstance(predicate, Compare):
        return COMPARISON_OPERATORS[predicate.op](record[predicate.column.name], predicate.value)
    if isinstance(predicate, IsTrue):
        return bool(record[predicate.column.name])
    if isinstance(predicate, InSet):
        return record[predicate.column.name] in predicate.values
    if isinstance(predicate, TagCoverage):
        tag_names = set(record.get('tag_names') or ())
        if predicate.require_all:
            return predicate.names <= tag_names
        return bool(predicate.names & tag_names)
    raise TypeError(f"Unknown predicate node: {predicate!r}")
