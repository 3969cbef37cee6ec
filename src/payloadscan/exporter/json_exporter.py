"""JSON exporter."""
import json
from datetime import datetime
from pathlib import Path
from typing import List

from payloadscan import __version__
from payloadscan.schema.models import EndpointReport


class JsonExporter:
    """Export endpoint scan results to JSON."""

    def export(
        self,
        output_file: Path,
        reports: List[EndpointReport],
        source: str = "",
    ) -> None:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "metadata": {
                "created_at": datetime.now().isoformat(),
                "tool_version": __version__,
                "source": source,
                "total_endpoints": len(reports),
                "total_return_fields": sum(len(r.return_fields) for r in reports),
                "total_body_fields": sum(len(r.body_fields) for r in reports),
            },
            "endpoints": [r.to_dict() for r in reports],
        }

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, default=str)
