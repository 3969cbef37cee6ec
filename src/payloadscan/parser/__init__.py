"""
Host front ends for payload introspection.

- host_ports: abstract metadata, type-resolution and member-classification ports
- snapshot_parser: JSON symbol snapshots
- python_host: live Python Protocol interfaces
"""

from .host_ports import HostModel, MemberClassificationPort, MetadataPort, TypeResolutionPort
from .snapshot_parser import SnapshotError, SnapshotHost, SnapshotParser
from .type_parser import TypeSyntaxError, parse_type

__all__ = [
    "HostModel",
    "MemberClassificationPort",
    "MetadataPort",
    "TypeResolutionPort",
    "SnapshotError",
    "SnapshotHost",
    "SnapshotParser",
    "TypeSyntaxError",
    "parse_type",
]
