"""Payload type of an endpoint method."""
import logging
from typing import FrozenSet, Optional

from payloadscan.config import EMPTY_RETURN_TYPES
from payloadscan.introspection.annotation_matcher import AnnotationMatcher
from payloadscan.introspection.generic_substitutor import GenericSubstitutor
from payloadscan.schema.models import (
    ClassType,
    MethodSignature,
    Suspending,
    TypeRef,
    WildcardType,
)

logger = logging.getLogger(__name__)


class EffectiveTypeResolver:
    """Computes the type an endpoint actually returns"""

    def __init__(
        self,
        matcher: AnnotationMatcher,
        substitutor: GenericSubstitutor,
        empty_return_types: Optional[FrozenSet[str]] = None,
        exclusion_mode: str = "exact",
    ):
        """
        Args:
            matcher: Endpoint eligibility gate
            substitutor: Generic wrapper unwrapping
            empty_return_types: Names of types meaning "no payload"
            exclusion_mode: "exact" compares names, "substring" rejects any
                rendered type containing "Unit" or "Void"
        """
        self.matcher = matcher
        self.substitutor = substitutor
        self.empty_return_types = (
            EMPTY_RETURN_TYPES if empty_return_types is None else frozenset(empty_return_types)
        )
        self.exclusion_mode = exclusion_mode

    def resolve(self, signature: MethodSignature) -> Optional[ClassType]:
        """
        Resolve the concrete payload class of an endpoint method.

        Suspending methods take their payload from the continuation's type
        argument, other methods from the declared return type.

        Args:
            signature: Method to resolve

        Returns:
            ClassType or None if the method is not an endpoint or returns nothing
        """
        if not self.matcher.is_endpoint(signature):
            return None

        source = self.payload_source(signature)
        if not isinstance(source, ClassType):
            logger.debug(f"{signature.qualified_name}: payload is not a class type")
            return None
        if self._is_empty(source):
            logger.debug(f"{signature.qualified_name}: {source.render()} carries no payload")
            return None

        effective = self.substitutor.unwrap(source)
        if self.exclusion_mode == "exact" and self._is_empty(effective):
            logger.debug(f"{signature.qualified_name}: {source.render()} wraps no payload")
            return None
        return effective

    @staticmethod
    def payload_source(signature: MethodSignature) -> Optional[TypeRef]:
        """Type the payload is read from, before any unwrapping."""
        shape = signature.call_shape
        if isinstance(shape, Suspending):
            source = shape.continuation_type
            if isinstance(source, WildcardType):
                return source.bound
            return source
        return shape.return_type

    def _is_empty(self, ref: ClassType) -> bool:
        if self.exclusion_mode == "substring":
            text = ref.render()
            return "Unit" in text or "Void" in text
        return ref.name in self.empty_return_types
