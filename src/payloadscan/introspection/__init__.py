"""
Payload Introspection Module

Determines the payload type of API interface methods and flattens its fields.
Supports:
- Endpoint detection from HTTP verb annotations
- Suspending methods (payload carried by the continuation parameter)
- Generic wrapper unwrapping (Call<Response<List<Dto>>> -> Dto)
- Recursive field collection with cycle protection
- Request body parameter lookup
"""

from .annotation_matcher import AnnotationMatcher
from .body_parameter import BodyParameterLocator
from .effective_type import EffectiveTypeResolver
from .endpoint_analyzer import EndpointAnalyzer
from .field_collector import FieldCollector
from .generic_substitutor import GenericSubstitutor

__all__ = [
    "AnnotationMatcher",
    "BodyParameterLocator",
    "EffectiveTypeResolver",
    "EndpointAnalyzer",
    "FieldCollector",
    "GenericSubstitutor",
]
