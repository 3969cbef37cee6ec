"""
Python Host - Host model over live Python classes.

Reads API interfaces written as ``typing.Protocol`` classes whose methods
carry the markers from ``payloadscan.markers``:

- ``async def`` methods are suspending, the return annotation is the payload
- ``Annotated[T, Body]`` marks the body parameter
- ``ClassVar`` attributes are static fields, ``Enum`` members enum constants
- ``Optional[X]`` is read as ``X``
"""

import enum
import importlib
import inspect
import logging
import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Union

from payloadscan.markers import annotation_names
from payloadscan.parser.host_ports import HostModel
from payloadscan.schema.models import (
    ClassDefinition,
    ClassType,
    FieldDefinition,
    MethodSignature,
    ParameterInfo,
    PrimitiveType,
    Suspending,
    TypeRef,
    TypeVariable,
)

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = (int, float, complex, str, bytes, bool)

UNION_TYPES = (Union, getattr(types, "UnionType", Union))

IGNORED_BASES = ("builtins.object", "typing.Generic", "typing.Protocol")


@dataclass(frozen=True)
class PythonMethod:
    """Method node: a function declared on an interface class."""

    owner: type
    name: str

    @property
    def function(self):
        return vars(self.owner)[self.name]


def is_protocol(cls: type) -> bool:
    return bool(getattr(cls, "_is_protocol", False)) and cls is not typing.Protocol


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


class PythonHost(HostModel):
    """Host model over Python interfaces and the classes they reference"""

    def __init__(self, interfaces: Iterable[type]):
        self.interfaces: List[type] = list(interfaces)
        self._types: Dict[str, type] = {}
        self._definitions: Dict[str, ClassDefinition] = {}
        for interface in self.interfaces:
            self._register(interface)

    @classmethod
    def from_module(cls, module) -> "PythonHost":
        """
        Collect the Protocol classes defined by a module.

        Args:
            module: Module object or importable module name
        """
        if isinstance(module, str):
            module = importlib.import_module(module)

        interfaces = [
            obj for obj in vars(module).values()
            if isinstance(obj, type) and obj.__module__ == module.__name__ and is_protocol(obj)
        ]
        logger.info(f"Found {len(interfaces)} interfaces in {module.__name__}")
        return cls(interfaces)

    # ------------------------------------------------------------------
    # Metadata port
    # ------------------------------------------------------------------

    def iter_methods(self) -> Iterable[PythonMethod]:
        for interface in self.interfaces:
            for name, attr in vars(interface).items():
                if inspect.isfunction(attr) and not name.startswith("_"):
                    yield PythonMethod(interface, name)

    def describe_method(self, node: PythonMethod) -> MethodSignature:
        func = node.function
        hints = self._type_hints(func)

        return_type = self.convert(hints["return"]) if "return" in hints else None

        parameters = []
        for index, (name, param) in enumerate(inspect.signature(func).parameters.items()):
            if index == 0 and name in ("self", "cls"):
                continue
            hint = hints.get(name, param.annotation)
            parameters.append(self._parameter(name, hint))

        shape = Suspending(return_type) if inspect.iscoroutinefunction(func) else None

        return MethodSignature(
            name=node.name,
            owner=qualified_name(node.owner),
            owner_is_interface=is_protocol(node.owner),
            return_type=return_type,
            parameters=tuple(parameters),
            annotations=self._merged_annotations(node),
            call_shape=shape,
        )

    def _parameter(self, name: str, hint: Any) -> ParameterInfo:
        markers = ()
        if typing.get_origin(hint) is typing.Annotated:
            markers = hint.__metadata__
            hint = typing.get_args(hint)[0]

        names = frozenset(
            marker.__name__ if isinstance(marker, type) else type(marker).__name__
            for marker in markers
        )
        if hint is inspect.Parameter.empty:
            return ParameterInfo(name, PrimitiveType("Any"), names)
        return ParameterInfo(name, self.convert(hint), names)

    @staticmethod
    def _merged_annotations(node: PythonMethod) -> frozenset:
        """Markers of the method and of the same method on base classes."""
        names = set()
        for klass in node.owner.__mro__:
            func = vars(klass).get(node.name)
            if inspect.isfunction(func):
                names.update(annotation_names(func))
        return frozenset(names)

    # ------------------------------------------------------------------
    # Type-resolution port
    # ------------------------------------------------------------------

    def resolve_class(self, ref: ClassType) -> Optional[ClassDefinition]:
        if ref.name in self._definitions:
            return self._definitions[ref.name]

        cls = self._types.get(ref.name)
        if cls is None:
            return None

        definition = self._define(cls)
        self._definitions[ref.name] = definition
        return definition

    def _define(self, cls: type) -> ClassDefinition:
        name = qualified_name(cls)
        type_parameters = tuple(
            param.__name__ for param in getattr(cls, "__parameters__", ())
            if isinstance(param, typing.TypeVar)
        )
        supertypes = tuple(
            base for base in (self.convert(b) for b in getattr(cls, "__orig_bases__", cls.__bases__))
            if isinstance(base, ClassType) and base.name not in IGNORED_BASES
        )

        if isinstance(cls, enum.EnumMeta):
            fields = tuple(
                FieldDefinition(
                    name=member.name,
                    type=ClassType(name),
                    owner=name,
                    is_static=True,
                    is_enum_constant=True,
                )
                for member in cls
            )
            return ClassDefinition(name, "enum", type_parameters, fields, supertypes)

        try:
            own = inspect.get_annotations(cls)
        except NameError as e:
            logger.warning(f"Cannot evaluate annotations of {name}: {e}")
            own = {}
        hints = self._type_hints(cls)
        fields = []
        for field_name, raw in own.items():
            hint = hints.get(field_name, raw)
            is_static = typing.get_origin(hint) is typing.ClassVar
            fields.append(FieldDefinition(
                name=field_name,
                type=self.convert(hint),
                owner=name,
                is_static=is_static,
            ))

        kind = "interface" if is_protocol(cls) else "class"
        return ClassDefinition(name, kind, type_parameters, tuple(fields), supertypes)

    # ------------------------------------------------------------------
    # Conversion of Python typing objects
    # ------------------------------------------------------------------

    def convert(self, hint: Any) -> TypeRef:
        """
        Convert a Python type hint into a type reference.

        Args:
            hint: Evaluated annotation (class, generic alias, TypeVar, ...)

        Returns:
            TypeRef: ClassType for classes and generic aliases, TypeVariable
                for TypeVars, PrimitiveType for everything without fields
        """
        if hint is None or hint is type(None):
            return ClassType("builtins.NoneType")
        if isinstance(hint, typing.TypeVar):
            return TypeVariable(hint.__name__)
        if isinstance(hint, str):
            return ClassType(hint)
        if isinstance(hint, typing.ForwardRef):
            return ClassType(hint.__forward_arg__)
        if hint is typing.Any:
            return PrimitiveType("Any")

        origin = typing.get_origin(hint)
        args = typing.get_args(hint)

        if origin is typing.Annotated or origin is typing.ClassVar:
            return self.convert(args[0])
        if origin in UNION_TYPES:
            members = [arg for arg in args if arg is not type(None)]
            if len(members) == 1:
                return self.convert(members[0])
            return PrimitiveType(" | ".join(self.convert(arg).render() for arg in members))
        if isinstance(origin, type):
            converted = tuple(self._convert_arg(arg) for arg in args)
            return ClassType(self._register(origin), converted)

        if hint in PRIMITIVE_TYPES:
            return PrimitiveType(hint.__name__)
        if isinstance(hint, type):
            return ClassType(self._register(hint))
        return PrimitiveType(repr(hint))

    def _convert_arg(self, arg: Any) -> TypeRef:
        if isinstance(arg, (list, tuple)) or arg is Ellipsis:
            return PrimitiveType(repr(arg))
        return self.convert(arg)

    def _register(self, cls: type) -> str:
        name = qualified_name(cls)
        self._types.setdefault(name, cls)
        return name

    @staticmethod
    def _type_hints(obj: Any) -> Dict[str, Any]:
        try:
            return typing.get_type_hints(obj, include_extras=True)
        except (NameError, TypeError) as e:
            logger.warning(f"Cannot evaluate annotations of {obj!r}: {e}")
            return {}
