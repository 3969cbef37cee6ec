"""
Endpoint Analyzer - Entry point for payload field extraction.

Wires the annotation matcher, effective type resolver, generic substitutor,
field collector and body parameter locator over one host model.

Usage:
```python
analyzer = EndpointAnalyzer(SnapshotHost.from_file("symbols.json"))
for report in analyzer.scan():
    print(report.qualified_name, [f.name for f in report.return_fields])
```
"""

import logging
from typing import Any, List, Optional, Tuple

from payloadscan.config import ScanConfig
from payloadscan.introspection.annotation_matcher import AnnotationMatcher
from payloadscan.introspection.body_parameter import BodyParameterLocator
from payloadscan.introspection.effective_type import EffectiveTypeResolver
from payloadscan.introspection.field_collector import FieldCollector
from payloadscan.introspection.generic_substitutor import GenericSubstitutor
from payloadscan.parser.host_ports import HostModel
from payloadscan.schema.models import ClassType, EndpointReport, FieldRecord

logger = logging.getLogger(__name__)


class EndpointAnalyzer:
    """Computes payload fields of endpoint methods of a host model"""

    def __init__(self, host: HostModel, config: Optional[ScanConfig] = None):
        """
        Initialize analyzer

        Args:
            host: Host front end implementing the metadata, type-resolution
                and member-classification ports
            config: Scan settings (defaults to ScanConfig())
        """
        self.host = host
        self.config = config or ScanConfig()

        self.matcher = AnnotationMatcher(self.config.endpoint_annotations)
        self.substitutor = GenericSubstitutor(host, self.config.unwrap_parameter_index)
        self.collector = FieldCollector(host, host, self.substitutor)
        self.type_resolver = EffectiveTypeResolver(
            self.matcher,
            self.substitutor,
            empty_return_types=self.config.empty_return_types,
            exclusion_mode=self.config.exclusion_mode,
        )
        self.body_locator = BodyParameterLocator(
            self.matcher,
            self.collector,
            body_annotations=self.config.body_annotations,
        )

    def compute_return_type_fields(self, method: Any) -> List[FieldRecord]:
        """
        Return all fields of the return type of an endpoint method.

        Includes the fields of nested classes and sees through generic
        wrappers. Unit and Void return types, and static fields, are ignored.

        Args:
            method: Host method node

        Returns:
            List of fields, empty if the method is not an endpoint of an
            interface or has no payload
        """
        signature = self.host.describe_method(method)
        effective = self.type_resolver.resolve(signature)
        if effective is None:
            return []
        return self.collector.collect(effective)

    def compute_body_parameter_fields(
        self, method: Any
    ) -> Optional[Tuple[ClassType, List[FieldRecord]]]:
        """
        Return the body parameter type of an endpoint method with its fields.

        Args:
            method: Host method node

        Returns:
            (body type, fields) or None if there is no body parameter
        """
        signature = self.host.describe_method(method)
        return self.body_locator.locate(signature)

    def analyze(self, method: Any) -> Optional[EndpointReport]:
        """Full report for one method, None if it is not an endpoint."""
        signature = self.host.describe_method(method)
        if not self.matcher.is_endpoint(signature):
            return None

        report = EndpointReport(
            owner=signature.owner,
            method=signature.name,
            annotations=sorted(self.matcher.matched_annotations(signature)),
            suspending=signature.is_suspending,
            return_type=self.type_resolver.payload_source(signature),
        )

        effective = self.type_resolver.resolve(signature)
        if effective is not None:
            report.effective_type = effective
            report.return_fields = self.collector.collect(effective)

        body = self.body_locator.locate(signature)
        if body is not None:
            report.body_type, report.body_fields = body

        return report

    def scan(self) -> List[EndpointReport]:
        """Analyze every method of the host, skipping non-endpoints."""
        reports = []
        for method in self.host.iter_methods():
            report = self.analyze(method)
            if report is not None:
                reports.append(report)

        logger.info(f"Analyzed {len(reports)} endpoint methods")
        return reports
