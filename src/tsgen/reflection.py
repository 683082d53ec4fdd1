"""Python runtime reflection exposed as TypeDescriptor handles."""
from __future__ import annotations

import abc
import collections
import collections.abc
import dataclasses
import datetime
import decimal
import enum
import functools
import inspect
import logging
import re
import sys
import types
import typing
from typing import Any, ForwardRef, Optional, TypeVar

import typing_extensions
from typing_extensions import evaluate_forward_ref, get_original_bases, is_protocol

from tsgen.metadata import PrimitiveKind, TypeDescriptor

logger = logging.getLogger(__name__)


# ============================================================
# Shape tables
# ============================================================

NONE_TYPE = type(None)

PRIMITIVE_KINDS: dict[Any, PrimitiveKind] = {
    bool: PrimitiveKind.BOOLEAN,
    int: PrimitiveKind.NUMBER,
    float: PrimitiveKind.NUMBER,
    decimal.Decimal: PrimitiveKind.NUMBER,
    str: PrimitiveKind.STRING,
    datetime.datetime: PrimitiveKind.DATE_TIME,
    datetime.date: PrimitiveKind.DATE_TIME,
    NONE_TYPE: PrimitiveKind.NONE,
    Any: PrimitiveKind.ANY,
    object: PrimitiveKind.ANY,
}

SEQUENCE_ORIGINS: frozenset[Any] = frozenset(
    {
        list,
        set,
        frozenset,
        collections.deque,
        collections.abc.Sequence,
        collections.abc.MutableSequence,
        collections.abc.Set,
        collections.abc.MutableSet,
        collections.abc.Collection,
        collections.abc.Iterable,
        collections.abc.Iterator,
        collections.abc.Reversible,
    }
)

MAPPING_ORIGINS: frozenset[Any] = frozenset(
    {
        dict,
        collections.OrderedDict,
        collections.defaultdict,
        collections.Counter,
        collections.abc.Mapping,
        collections.abc.MutableMapping,
    }
)

UNION_ORIGINS: frozenset[Any] = frozenset({typing.Union, types.UnionType})

# Bases that never show up in an extends/implements clause.
ROOT_BASES: frozenset[Any] = frozenset(
    {object, typing.Generic, typing.Protocol, typing_extensions.Protocol, abc.ABC}
)

# Classes from these modules are scalars, containers or typing machinery, never user structures.
NON_STRUCTURAL_MODULES: frozenset[str] = frozenset(
    {
        "builtins",
        "typing",
        "typing_extensions",
        "types",
        "abc",
        "enum",
        "collections",
        "collections.abc",
        "datetime",
        "decimal",
    }
)

# Unevaluated field annotations that are not instance fields.
CLASS_VAR_SOURCE = re.compile(r"^(?:typing(?:_extensions)?\.)?ClassVar\b")
INIT_VAR_SOURCE = re.compile(r"^(?:dataclasses\.)?InitVar\b")

_CONSTRUCTIBLE_PARAMETERS: set[TypeVar] = set()


def constructible(parameter: TypeVar) -> TypeVar:
    """Mark a TypeVar as requiring a parameterless constructor on its arguments."""
    if not isinstance(parameter, TypeVar):
        raise TypeError(f"constructible() expects a TypeVar, got {parameter!r}")
    _CONSTRUCTIBLE_PARAMETERS.add(parameter)
    return parameter


# ============================================================
# Helpers
# ============================================================

def _lookup(table: Any, key: Any, default: Any = None) -> Any:
    """Hash-safe lookup: annotations are not always hashable."""
    try:
        if isinstance(table, dict):
            return table.get(key, default)
        return key in table
    except TypeError:
        return default if isinstance(table, dict) else False


def unwrap_annotation(annotation: Any) -> Any:
    """Strip Annotated/Final/NewType wrappers; unresolved forward references become Any."""
    while True:
        if annotation is None:
            return NONE_TYPE
        if isinstance(annotation, (str, ForwardRef)):
            return Any
        origin = typing.get_origin(annotation)
        if origin is typing.Annotated or origin is typing.Final:
            annotation = typing.get_args(annotation)[0]
            continue
        if isinstance(annotation, typing.NewType):
            annotation = annotation.__supertype__
            continue
        return annotation


def evaluate_annotation(
    annotation: Any,
    module_name: str | None,
    local_namespace: Optional[dict[str, Any]] = None,
) -> Any:
    """
    Evaluate one string/ForwardRef annotation in the namespace of its declaring module.

    Returns Any when the reference cannot be evaluated (TYPE_CHECKING-only imports,
    typos, missing attributes); other annotations are returned unchanged.
    """
    if not isinstance(annotation, (str, ForwardRef)):
        return annotation

    module = sys.modules.get(module_name or "")
    global_namespace = dict(vars(module)) if module is not None else {}
    try:
        forward_ref = annotation if isinstance(annotation, ForwardRef) else ForwardRef(annotation, is_argument=False)
        return evaluate_forward_ref(forward_ref, globals=global_namespace, locals=local_namespace)
    except Exception as exc:
        logger.debug("Unresolved annotation %r in %s: %s", _annotation_source(annotation), module_name, exc)
        return Any


def collect_own_annotations(owner: Any) -> dict[str, Any]:
    """Annotations declared on a class body or function itself, unevaluated."""
    try:
        return dict(inspect.get_annotations(owner))
    except NameError as exc:
        # Deferred annotations referencing names missing at runtime.
        logger.debug("Could not evaluate annotations of %r: %s", owner, exc)
    if sys.version_info >= (3, 14):
        import annotationlib

        return dict(annotationlib.get_annotations(owner, format=annotationlib.Format.FORWARDREF))
    return dict(getattr(owner, "__dict__", {}).get("__annotations__", {}))


def _annotation_source(annotation: Any) -> Optional[str]:
    if isinstance(annotation, ForwardRef):
        return annotation.__forward_arg__
    return annotation.strip() if isinstance(annotation, str) else None


def _is_class_var(annotation: Any) -> bool:
    source = _annotation_source(annotation)
    if source is not None:
        return CLASS_VAR_SOURCE.match(source) is not None
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def _is_init_var(annotation: Any) -> bool:
    source = _annotation_source(annotation)
    if source is not None:
        return INIT_VAR_SOURCE.match(source) is not None
    return annotation is dataclasses.InitVar or isinstance(annotation, dataclasses.InitVar)


# ============================================================
# Descriptor
# ============================================================

class PythonTypeDescriptor(TypeDescriptor):
    """TypeDescriptor over a Python class, TypeVar or typing annotation."""

    def __init__(self, annotation: Any) -> None:
        self._type = unwrap_annotation(annotation)
        self._origin = typing.get_origin(self._type)
        self._args = typing.get_args(self._type)

    @property
    def runtime_type(self) -> Any:
        return self._type

    @property
    def _cls(self) -> Optional[type]:
        # Checked through the origin first: list[int] passes isinstance(..., type) on 3.10.
        if self._origin is not None:
            return self._origin if isinstance(self._origin, type) else None
        return self._type if isinstance(self._type, type) else None

    @property
    def _container(self) -> Any:
        return self._origin if self._origin is not None else self._type

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PythonTypeDescriptor):
            return NotImplemented
        if self._type is other._type:
            return True
        try:
            return bool(self._type == other._type)
        except TypeError:
            return False

    def __hash__(self) -> int:
        try:
            return hash(self._type)
        except TypeError:
            return id(self._type)

    # ---- naming ----

    @property
    def display_name(self) -> str:
        if self.is_generic_parameter:
            return repr(self._type)
        if self._origin is None and isinstance(self._type, type):
            module = self._type.__module__
            qualname = self._type.__qualname__
            return qualname if module == "builtins" else f"{module}.{qualname}"
        return repr(self._type)

    @property
    def name(self) -> str:
        if self.is_generic_parameter:
            return self._type.__name__
        cls = self._cls
        if cls is not None:
            return cls.__name__
        return getattr(self._type, "__name__", None) or self.display_name

    # ---- classification ----

    @property
    def is_enum(self) -> bool:
        cls = self._cls
        return cls is not None and issubclass(cls, enum.Enum)

    @property
    def is_interface(self) -> bool:
        cls = self._cls
        return cls is not None and is_protocol(cls)

    @property
    def is_abstract(self) -> bool:
        cls = self._cls
        return cls is not None and inspect.isabstract(cls)

    @property
    def is_structural(self) -> bool:
        cls = self._cls
        if cls is None or issubclass(cls, enum.Enum):
            return False
        if cls.__module__ in NON_STRUCTURAL_MODULES:
            return False
        return not (
            _lookup(PRIMITIVE_KINDS, cls) is not None
            or _lookup(SEQUENCE_ORIGINS, cls)
            or _lookup(MAPPING_ORIGINS, cls)
        )

    @property
    def is_generic_parameter(self) -> bool:
        return isinstance(self._type, TypeVar)

    @property
    def is_generic_definition(self) -> bool:
        return (
            self._origin is None
            and isinstance(self._type, type)
            and bool(getattr(self._type, "__parameters__", ()))
        )

    @property
    def is_constructed_generic(self) -> bool:
        return self._origin is not None and isinstance(self._origin, type) and bool(self._args)

    @property
    def requires_default_constructor(self) -> bool:
        return self.is_generic_parameter and self._type in _CONSTRUCTIBLE_PARAMETERS

    @property
    def primitive_kind(self) -> Optional[PrimitiveKind]:
        if self._origin is not None:
            return None
        return _lookup(PRIMITIVE_KINDS, self._type)

    # ---- generics ----

    def generic_definition(self) -> TypeDescriptor:
        if self.is_constructed_generic:
            return describe(self._origin)
        return self

    def generic_arguments(self) -> list[TypeDescriptor]:
        if self.is_constructed_generic:
            return [describe(argument) for argument in self._args]
        if self.is_generic_definition:
            return [describe(parameter) for parameter in self._type.__parameters__]
        return []

    def generic_constraints(self) -> list[TypeDescriptor]:
        if not self.is_generic_parameter or self._type.__bound__ is None:
            return []
        bound = evaluate_annotation(self._type.__bound__, getattr(self._type, "__module__", None))
        return [describe(bound)]

    def generic_alternatives(self) -> list[TypeDescriptor]:
        if not self.is_generic_parameter:
            return []
        module_name = getattr(self._type, "__module__", None)
        return [
            describe(evaluate_annotation(constraint, module_name))
            for constraint in self._type.__constraints__
        ]

    # ---- hierarchy ----

    def _supertypes(self) -> list[TypeDescriptor]:
        cls = self._cls
        if cls is None:
            return []
        supertypes: list[TypeDescriptor] = []
        for base in get_original_bases(cls):
            base_origin = typing.get_origin(base) or base
            if _lookup(ROOT_BASES, base_origin):
                continue
            supertypes.append(describe(base))
        return supertypes

    def base_type(self) -> Optional[TypeDescriptor]:
        if self.is_interface:
            return None
        for supertype in self._supertypes():
            if not supertype.is_interface:
                return supertype
        return None

    def interfaces(self) -> list[TypeDescriptor]:
        supertypes = self._supertypes()
        base = self.base_type()
        return [supertype for supertype in supertypes if supertype != base]

    # ---- members ----

    def members(self) -> list[tuple[str, TypeDescriptor]]:
        cls = self._cls
        if cls is None:
            return []

        module_name = cls.__module__
        class_namespace = dict(vars(cls))

        collected: list[tuple[str, TypeDescriptor]] = []
        for field_name, raw_annotation in collect_own_annotations(cls).items():
            if field_name.startswith("_") or _is_class_var(raw_annotation) or _is_init_var(raw_annotation):
                continue
            annotation = evaluate_annotation(raw_annotation, module_name, class_namespace)
            if _is_class_var(annotation) or _is_init_var(annotation):
                continue
            collected.append((field_name, describe(annotation)))

        for attribute_name, attribute in vars(cls).items():
            if attribute_name.startswith("_"):
                continue
            if isinstance(attribute, property):
                getter = attribute.fget
            elif isinstance(attribute, functools.cached_property):
                getter = attribute.func
            else:
                continue
            if getter is None:
                continue
            return_annotation = collect_own_annotations(getter).get("return", Any)
            collected.append((attribute_name, describe(evaluate_annotation(return_annotation, getter.__module__))))

        return collected

    def enum_members(self) -> list[tuple[str, Any]]:
        if not self.is_enum:
            return []
        return [(member_name, member.value) for member_name, member in self._cls.__members__.items()]

    # ---- containers ----

    def element_type(self) -> Optional[TypeDescriptor]:
        container = self._container
        if _lookup(SEQUENCE_ORIGINS, container):
            return describe(self._args[0]) if self._args else describe(Any)
        if container is tuple:
            if not self._args:
                return describe(Any)
            if len(self._args) == 2 and self._args[1] is Ellipsis:
                return describe(self._args[0])
        return None

    def key_value_types(self) -> Optional[tuple[TypeDescriptor, TypeDescriptor]]:
        if not _lookup(MAPPING_ORIGINS, self._container):
            return None
        key_type = self._args[0] if len(self._args) > 0 else Any
        value_type = self._args[1] if len(self._args) > 1 else Any
        return describe(key_type), describe(value_type)

    def tuple_elements(self) -> Optional[list[TypeDescriptor]]:
        if self._container is not tuple or not self._args:
            return None
        if len(self._args) == 2 and self._args[1] is Ellipsis:
            return None
        return [describe(argument) for argument in self._args]

    def union_members(self) -> list[TypeDescriptor]:
        if not _lookup(UNION_ORIGINS, self._origin):
            return []
        return [describe(argument) for argument in self._args]


def describe(runtime_type: Any) -> TypeDescriptor:
    """Return a descriptor for a Python type or annotation (descriptors pass through)."""
    if isinstance(runtime_type, TypeDescriptor):
        return runtime_type
    return PythonTypeDescriptor(runtime_type)
