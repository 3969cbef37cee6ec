"""Endpoint eligibility from annotation metadata."""
from typing import FrozenSet, Optional

from payloadscan.config import ENDPOINT_ANNOTATIONS
from payloadscan.schema.models import MethodSignature


class AnnotationMatcher:
    """Decides whether a method is a network endpoint."""

    def __init__(self, endpoint_annotations: Optional[FrozenSet[str]] = None):
        self.endpoint_annotations = (
            ENDPOINT_ANNOTATIONS if endpoint_annotations is None else frozenset(endpoint_annotations)
        )

    def is_endpoint(self, signature: MethodSignature) -> bool:
        """
        Check that the method belongs to an interface and carries one of the
        recognised HTTP verb annotations (qualified or bare).

        Args:
            signature: Method to check

        Returns:
            bool: True if the method is an endpoint method
        """
        if not signature.owner_is_interface:
            return False
        return not self.endpoint_annotations.isdisjoint(signature.annotations)

    def matched_annotations(self, signature: MethodSignature) -> FrozenSet[str]:
        """Recognised annotations present on the method."""
        return self.endpoint_annotations & frozenset(signature.annotations)
