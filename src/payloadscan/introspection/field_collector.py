"""
Field Collector - Flattens the fields of a payload class graph.

For ``Dto { a: Int, b: String, c: Inner }`` and ``Inner { d: Int }`` the
result is ``[a, b, c, d]``: a class's own fields first, then the nested
fields of each class-typed field, depth-first.

Wrapped field types are peeled before expanding, so ``Dto { items: List<Item> }``
lists ``items`` followed by the fields of ``Item``.
"""

import logging
from typing import FrozenSet, List, Optional

from payloadscan.introspection.generic_substitutor import GenericSubstitutor
from payloadscan.parser.host_ports import MemberClassificationPort, TypeResolutionPort
from payloadscan.schema.models import ClassType, FieldDefinition, FieldRecord

logger = logging.getLogger(__name__)


class FieldCollector:
    """Collects declared fields of a class and of the classes it references"""

    def __init__(
        self,
        resolver: TypeResolutionPort,
        members: MemberClassificationPort,
        substitutor: Optional[GenericSubstitutor] = None,
    ):
        self.resolver = resolver
        self.members = members
        self.substitutor = substitutor or GenericSubstitutor(resolver)

    def collect(self, ref: ClassType) -> List[FieldRecord]:
        """
        Flatten all fields reachable from ``ref``.

        Static fields are ignored, enum constants are kept. Each field type
        is unwrapped through its own type arguments before it is expanded;
        the owner's type arguments are never bound into its fields. A class
        already being expanded higher up the same branch is not expanded
        again, so self-referencing types terminate. The same class met on
        two different branches is expanded on both.

        Args:
            ref: Concrete class reference

        Returns:
            List[FieldRecord]: Fields in declaration order, nested fields after
                their parent class's fields. Empty if the class cannot be resolved.
        """
        return self._collect(ref, frozenset())

    def _collect(self, ref: ClassType, path: FrozenSet[str]) -> List[FieldRecord]:
        if ref.name in path:
            logger.debug(f"Cycle on {ref.name}, not expanding again")
            return []

        definition = self.resolver.resolve_class(ref)
        if definition is None:
            logger.debug(f"Cannot resolve {ref.render()}, no fields")
            return []

        inner_fields = [fld for fld in definition.fields if self._is_retained(fld)]
        records = [FieldRecord(fld) for fld in inner_fields]

        path = path | {ref.name}
        for fld in inner_fields:
            if self.members.is_static(fld) or not isinstance(fld.type, ClassType):
                continue
            records.extend(self._collect(self.substitutor.unwrap(fld.type), path))

        return records

    def _is_retained(self, fld: FieldDefinition) -> bool:
        return not self.members.is_static(fld) or self.members.is_enum_constant(fld)
