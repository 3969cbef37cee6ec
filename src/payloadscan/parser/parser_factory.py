"""Factory for creating the host model matching a source."""
from pathlib import Path
from typing import Optional

from payloadscan.api.snapshot_client import SnapshotClient
from payloadscan.config import SnapshotSourceConfig
from payloadscan.parser.host_ports import HostModel
from payloadscan.parser.python_host import PythonHost
from payloadscan.parser.snapshot_parser import SnapshotHost


class HostFactory:
    """Factory for host models."""

    @staticmethod
    def detect_source_type(source: str) -> str:
        """
        Detect the kind of source.

        Args:
            source: URL, file path or module name

        Returns:
            str: 'url', 'snapshot' or 'module'

        Raises:
            ValueError: If the source is not supported
        """
        source = str(source)
        if source.startswith(("http://", "https://")):
            return "url"
        if source.lower().endswith(".json"):
            return "snapshot"
        if source and all(part.isidentifier() for part in source.split(".")):
            return "module"

        raise ValueError(f"Unsupported source: {source}")

    @staticmethod
    def create_host(
        source: str,
        source_config: Optional[SnapshotSourceConfig] = None,
        force_refresh: bool = False,
    ) -> HostModel:
        """
        Create host model for a source.

        Args:
            source: Snapshot URL, snapshot JSON path or importable module name
            source_config: Settings for remote snapshots
            force_refresh: Bypass the snapshot cache

        Returns:
            HostModel: SnapshotHost or PythonHost
        """
        source_type = HostFactory.detect_source_type(source)

        if source_type == "url":
            document = SnapshotClient(source_config).fetch(source, force_refresh=force_refresh)
            return SnapshotHost.from_dict(document)
        if source_type == "snapshot":
            return SnapshotHost.from_file(Path(source))
        return PythonHost.from_module(source)
