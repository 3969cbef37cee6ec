"""
Generic Substitutor - Peels generic wrapper types down to the payload class.

Endpoint payloads are usually wrapped, sometimes several times:

    Call<Response<List<Dto>>>  ->  Response<List<Dto>>  ->  List<Dto>  ->  Dto

Each step follows a single type argument of the current wrapper, the first
one unless a per-wrapper index is configured. Other arguments of
multi-parameter containers are never followed.
"""

import logging
from typing import Dict, Optional

from payloadscan.parser.host_ports import TypeResolutionPort
from payloadscan.schema.models import ClassType, TypeRef, WildcardType

logger = logging.getLogger(__name__)


class GenericSubstitutor:
    """Resolves a parameterized reference to its innermost concrete class"""

    def __init__(
        self,
        resolver: TypeResolutionPort,
        parameter_index: Optional[Dict[str, int]] = None,
    ):
        """
        Args:
            resolver: Type-resolution port of the host
            parameter_index: Wrapper class name -> index of the argument to follow
        """
        self.resolver = resolver
        self.parameter_index = dict(parameter_index or {})

    def unwrap(self, ref: ClassType) -> ClassType:
        """
        Follow generic wrapper layers until a non-generic class remains.

        When the followed argument is not a class (primitive, unbounded
        wildcard, type variable), the current wrapper is returned as is.

        Args:
            ref: Class reference to unwrap

        Returns:
            ClassType: Innermost class reference reachable from ``ref``
        """
        current = ref
        while True:
            substitution = self.resolver.resolve_substitution(current)
            if not substitution:
                return current

            index = self.parameter_index.get(current.name, 0)
            values = list(substitution.values())
            if index >= len(values):
                logger.debug(f"{current.render()}: no type argument at index {index}")
                return current

            inner = self._as_class(values[index])
            if inner is None:
                logger.debug(f"{current.render()}: argument is not a class, stopping")
                return current

            logger.debug(f"Unwrapped {current.render()} -> {inner.render()}")
            current = inner

    @staticmethod
    def _as_class(value: TypeRef) -> Optional[ClassType]:
        """Class reference carried by a substitution value, if any."""
        if isinstance(value, ClassType):
            return value
        if isinstance(value, WildcardType) and isinstance(value.bound, ClassType):
            return value.bound
        return None
