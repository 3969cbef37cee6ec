"""Abstract capability ports a host front end implements for the analysis."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from payloadscan.schema.models import (
    ClassDefinition,
    ClassType,
    FieldDefinition,
    MethodSignature,
    SubstitutionMap,
)

logger = logging.getLogger(__name__)


class MetadataPort(ABC):
    """Describes method nodes of the host program."""

    @abstractmethod
    def describe_method(self, node: Any) -> MethodSignature:
        """
        Build the signature of a method node.

        Args:
            node: Host-specific method handle

        Returns:
            MethodSignature: Owner interface-ness, return type, parameters,
                merged (inherited) annotations and call shape
        """
        pass

    @abstractmethod
    def iter_methods(self) -> Iterable[Any]:
        """Yield every method node the host knows about, in declaration order."""
        pass


class TypeResolutionPort(ABC):
    """Resolves type references against the host symbol table."""

    @abstractmethod
    def resolve_class(self, ref: ClassType) -> Optional[ClassDefinition]:
        """Return the class definition, or None when the class is not visible."""
        pass

    def resolve_substitution(self, ref: ClassType) -> SubstitutionMap:
        """
        Bind the formal type parameters of ``ref``'s class to its arguments.

        Raw references and non-generic classes give an empty map. Generic
        classes the host cannot see get positional formals (``#0``, ``#1``).

        Args:
            ref: Parameterized class reference

        Returns:
            SubstitutionMap: Ordered as the formals are declared
        """
        if not ref.args:
            return {}

        definition = self.resolve_class(ref)
        if definition is None or not definition.type_parameters:
            formals = [f"#{index}" for index in range(len(ref.args))]
        else:
            formals = list(definition.type_parameters)

        if len(formals) != len(ref.args):
            logger.warning(
                f"{ref.render()}: {len(ref.args)} type arguments for "
                f"{len(formals)} formal parameters, treating as raw"
            )
            return {}

        return dict(zip(formals, ref.args))


class MemberClassificationPort(ABC):
    """Classifies class members."""

    @abstractmethod
    def is_static(self, fld: FieldDefinition) -> bool:
        pass

    @abstractmethod
    def is_enum_constant(self, fld: FieldDefinition) -> bool:
        pass


class HostModel(MetadataPort, TypeResolutionPort, MemberClassificationPort):
    """A host front end offering all three ports."""

    def is_static(self, fld: FieldDefinition) -> bool:
        return fld.is_static or fld.is_enum_constant

    def is_enum_constant(self, fld: FieldDefinition) -> bool:
        return fld.is_enum_constant

    def get_class(self, name: str) -> Optional[ClassDefinition]:
        """Resolve a class by qualified name."""
        return self.resolve_class(ClassType(name))
