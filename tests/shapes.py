"""Sample types used across the test suite."""
from __future__ import annotations

import abc
import datetime
import enum
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, Any, Callable, ClassVar, Generic, NewType, Optional, Protocol, TypeVar, Union

from tsgen.reflection import constructible

if TYPE_CHECKING:
    from shapes_typing_only import Elsewhere

T = TypeVar("T")
K = TypeVar("K")
L = TypeVar("item")
TNew = constructible(TypeVar("TNew"))
TScalar = TypeVar("TScalar", int, str)
TFlex = constructible(TypeVar("TFlex", int, str))
TNode = TypeVar("TNode", bound="Node")

UserId = NewType("UserId", int)


# ---- enums ----

class Color(enum.Enum):
    Red = 0
    Green = 1
    Blue = 2


class Shade(enum.Enum):
    Dark = "dark"
    Light = "light"


class Priority(enum.IntEnum):
    High = 10
    Low = 1


# ---- scalars and containers ----

@dataclass
class Scalars:
    count: int
    ratio: float
    price: Decimal
    flag: bool
    label: str
    created: datetime.datetime
    day: datetime.date
    ident: uuid.UUID
    anything: Any
    nothing: None
    user: UserId
    weight: Annotated[float, "kg"]


class Node:
    value: int
    next: Node


class Containers:
    tags: list[str]
    unique: set[int]
    nodes: Sequence[Node]
    lookup: dict[str, int]
    by_id: dict[uuid.UUID, Node]
    by_color: dict[Color, int]
    pair: tuple[int, str]
    many: tuple[int, ...]
    maybe: Optional[Node]
    either: Union[int, str]
    callback: Callable[[int], str]
    matrix: list[list[int]]


# ---- cycles ----

class Parent:
    child: Child


class Child:
    parent: Parent


# ---- generics ----

class Box(Generic[T]):
    item: T


class IntBox(Box[int]):
    label: str


class Shelf:
    ints: Box[int]
    names: Box[str]
    raw: Box


class Holder(Generic[L]):
    held: L


class Entity:
    id: int


TEntity = TypeVar("TEntity", bound=Entity)


class Repository(Generic[TEntity, TNew]):
    items: list[TEntity]


class Measure(Generic[TScalar]):
    value: TScalar


class Factory(Generic[TFlex]):
    made: TFlex


class Chain(Generic[TNode]):
    head: TNode


# ---- interfaces ----

class Sized(Protocol):
    size: int


class Named(Protocol):
    name: str


class Labelled(Named, Protocol):
    label: str


class Keyed(Protocol[K]):
    key: K


class Base(Sized):
    id: int


class Derived(Base, Sized):
    extra: str


class Badge(Labelled, Named):
    code: str


class IntKeyed(Keyed[int]):
    note: str


# ---- abstract, properties ----

class Shape(abc.ABC):
    sides: int

    @abc.abstractmethod
    def area(self) -> float:
        ...


@dataclass
class Account:
    owner: str
    balance: float
    _internal: int = 0
    kind: ClassVar[str] = "account"

    @property
    def display(self) -> str:
        return f"{self.owner}: {self.balance}"

    @property
    def _secret(self) -> int:
        return self._internal


# ---- skipping ----

class HiddenBase:
    secret: str


class HiddenColor(enum.Enum):
    Black = 0


class Visible(HiddenBase):
    hidden: HiddenBase
    shade: HiddenColor
    note: str


class Marker(abc.ABC):
    tag: str


class Square(Shape):
    def area(self) -> float:
        return float(self.sides)


# ---- unresolvable annotations ----

class Partial:
    count: int
    label: str
    kind: ClassVar[str]
    other: Elsewhere

    @property
    def peer(self) -> Elsewhere:
        raise NotImplementedError


class PartialChild(Partial):
    extra: int


TBad = TypeVar("TBad", bound="uuid.DoesNotExist")


class BadBound(Generic[TBad]):
    item: TBad
