"""Request body parameter of an endpoint method."""
import logging
from typing import FrozenSet, List, Optional, Tuple

from payloadscan.config import BODY_ANNOTATIONS
from payloadscan.introspection.annotation_matcher import AnnotationMatcher
from payloadscan.introspection.field_collector import FieldCollector
from payloadscan.schema.models import ClassType, FieldRecord, MethodSignature

logger = logging.getLogger(__name__)


class BodyParameterLocator:
    """Finds the body parameter of an endpoint and flattens its fields"""

    def __init__(
        self,
        matcher: AnnotationMatcher,
        collector: FieldCollector,
        body_annotations: Optional[FrozenSet[str]] = None,
    ):
        self.matcher = matcher
        self.collector = collector
        self.body_annotations = (
            BODY_ANNOTATIONS if body_annotations is None else frozenset(body_annotations)
        )

    def locate(self, signature: MethodSignature) -> Optional[Tuple[ClassType, List[FieldRecord]]]:
        """
        Return the payload type and fields of the first body-annotated parameter.

        Only the first body parameter is considered; if its type is not a
        class, there is no result. A wrapped body such as ``List<Dto>`` is
        unwrapped the same way as a return type.

        Args:
            signature: Method to inspect

        Returns:
            (ClassType, fields) or None
        """
        if not self.matcher.is_endpoint(signature):
            return None

        for parameter in signature.parameters:
            if self.body_annotations.isdisjoint(parameter.annotations):
                continue
            if not isinstance(parameter.type, ClassType):
                logger.debug(
                    f"{signature.qualified_name}: body parameter {parameter.name} "
                    f"is not a class type"
                )
                return None
            body_type = self.collector.substitutor.unwrap(parameter.type)
            return body_type, self.collector.collect(body_type)

        return None
