"""Models describing the host type graph and endpoint scan results."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union


# ============================================================================
# Type references
# ============================================================================


@dataclass(frozen=True)
class ClassType:
    """Reference to a nominal class type, with use-site type arguments."""

    name: str
    args: Tuple["TypeRef", ...] = ()

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]

    def raw(self) -> "ClassType":
        """Same class without type arguments."""
        return ClassType(self.name)

    def render(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}<{', '.join(arg.render() for arg in self.args)}>"


@dataclass(frozen=True)
class WildcardType:
    """Wildcard argument (``?``, ``? extends X``, ``? super X``)."""

    bound: Optional["TypeRef"] = None
    variance: str = "extends"  # "extends" or "super"

    def render(self) -> str:
        if self.bound is None:
            return "?"
        return f"? {self.variance} {self.bound.render()}"


@dataclass(frozen=True)
class PrimitiveType:
    """Primitive or otherwise non-class value type."""

    name: str

    def render(self) -> str:
        return self.name


@dataclass(frozen=True)
class TypeVariable:
    """Unresolved formal type parameter, e.g. ``T``."""

    name: str

    def render(self) -> str:
        return self.name


@dataclass(frozen=True)
class ArrayType:
    """Array of a component type."""

    component: "TypeRef"

    def render(self) -> str:
        return f"{self.component.render()}[]"


TypeRef = Union[ClassType, WildcardType, PrimitiveType, TypeVariable, ArrayType]

# Formal parameter name -> use-site argument, in formal declaration order
SubstitutionMap = Dict[str, TypeRef]


# ============================================================================
# Declarations
# ============================================================================


@dataclass(frozen=True)
class FieldDefinition:
    """A field declared by a class."""

    name: str
    type: TypeRef
    owner: str = ""
    is_static: bool = False
    is_enum_constant: bool = False


@dataclass(frozen=True)
class ClassDefinition:
    """A class resolved from the host symbol table."""

    name: str
    kind: str = "class"  # "class", "interface", "enum"
    type_parameters: Tuple[str, ...] = ()
    fields: Tuple[FieldDefinition, ...] = ()
    supertypes: Tuple[ClassType, ...] = ()

    @property
    def is_interface(self) -> bool:
        return self.kind == "interface"

    def get_field(self, name: str) -> Optional[FieldDefinition]:
        """Return declared field by name."""
        for fld in self.fields:
            if fld.name == name:
                return fld
        return None


@dataclass(frozen=True)
class ParameterInfo:
    """A method parameter with its annotation names."""

    name: str
    type: TypeRef
    annotations: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class Direct:
    """Plain call: the payload is the declared return type."""

    return_type: Optional[TypeRef]


@dataclass(frozen=True)
class Suspending:
    """Suspending call: the payload is carried by the trailing continuation."""

    continuation_type: Optional[TypeRef]


CallShape = Union[Direct, Suspending]


@dataclass(frozen=True)
class MethodSignature:
    """Everything the analysis needs to know about one interface method."""

    name: str
    owner: str
    owner_is_interface: bool
    return_type: Optional[TypeRef]
    parameters: Tuple[ParameterInfo, ...] = ()
    annotations: FrozenSet[str] = frozenset()
    call_shape: Optional[CallShape] = None

    def __post_init__(self):
        if self.call_shape is None:
            object.__setattr__(self, "call_shape", Direct(self.return_type))

    @property
    def is_suspending(self) -> bool:
        return isinstance(self.call_shape, Suspending)

    @property
    def qualified_name(self) -> str:
        return f"{self.owner}.{self.name}"


@dataclass(frozen=True)
class FieldRecord:
    """One field met while flattening a payload type."""

    definition: FieldDefinition

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def type(self) -> TypeRef:
        return self.definition.type

    @property
    def owner(self) -> str:
        return self.definition.owner

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "name": self.name,
            "type": self.type.render(),
            "owner": self.owner,
            "enum_constant": self.definition.is_enum_constant,
        }


# ============================================================================
# Scan results
# ============================================================================


@dataclass
class EndpointReport:
    """Scan result for a single endpoint method."""

    owner: str
    method: str
    annotations: List[str] = field(default_factory=list)
    suspending: bool = False
    return_type: Optional[TypeRef] = None
    effective_type: Optional[ClassType] = None
    return_fields: List[FieldRecord] = field(default_factory=list)
    body_type: Optional[ClassType] = None
    body_fields: List[FieldRecord] = field(default_factory=list)
    scanned_at: datetime = field(default_factory=datetime.now)

    @property
    def qualified_name(self) -> str:
        return f"{self.owner}.{self.method}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        return {
            "owner": self.owner,
            "method": self.method,
            "annotations": sorted(self.annotations),
            "suspending": self.suspending,
            "return_type": self.return_type.render() if self.return_type else None,
            "effective_type": self.effective_type.render() if self.effective_type else None,
            "return_fields": [f.to_dict() for f in self.return_fields],
            "body_type": self.body_type.render() if self.body_type else None,
            "body_fields": [f.to_dict() for f in self.body_fields],
            "scanned_at": self.scanned_at.isoformat(),
        }
