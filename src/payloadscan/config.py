"""Configuração da aplicação."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Optional


ENDPOINT_ANNOTATIONS = frozenset({
    "retrofit2.http.DELETE",
    "retrofit2.http.GET",
    "retrofit2.http.POST",
    "retrofit2.http.PUT",
    "DELETE",
    "GET",
    "POST",
    "PUT",
})

BODY_ANNOTATIONS = frozenset({"retrofit2.http.Body", "Body"})

EMPTY_RETURN_TYPES = frozenset({
    "kotlin.Unit",
    "Unit",
    "java.lang.Void",
    "Void",
    "void",
    "None",
    "builtins.NoneType",
})

EXCLUSION_MODES = ("exact", "substring")


@dataclass
class ScanConfig:
    """Settings for endpoint detection and payload unwrapping."""

    endpoint_annotations: FrozenSet[str] = ENDPOINT_ANNOTATIONS
    body_annotations: FrozenSet[str] = BODY_ANNOTATIONS
    empty_return_types: FrozenSet[str] = EMPTY_RETURN_TYPES
    exclusion_mode: str = "exact"  # "exact" or "substring"
    # Wrapper class name -> index of the type argument to follow (default 0)
    unwrap_parameter_index: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        """Valida o modo de exclusão."""
        if self.exclusion_mode not in EXCLUSION_MODES:
            raise ValueError(
                f"Unknown exclusion mode: {self.exclusion_mode} "
                f"(expected one of {', '.join(EXCLUSION_MODES)})"
            )

    @classmethod
    def from_env(cls) -> "ScanConfig":
        """Carrega config de variáveis de ambiente."""
        extra = os.getenv("PAYLOADSCAN_EXTRA_ANNOTATIONS", "")
        extra_names = frozenset(name.strip() for name in extra.split(",") if name.strip())
        return cls(
            endpoint_annotations=ENDPOINT_ANNOTATIONS | extra_names,
            exclusion_mode=os.getenv("PAYLOADSCAN_EXCLUSION_MODE", "exact"),
        )


@dataclass
class SnapshotSourceConfig:
    """Acesso a snapshots remotos."""

    username: str = ""
    password: str = ""
    timeout: int = 30
    cache_dir: Path = Path(".cache/snapshots")

    @property
    def credentials(self) -> Optional[tuple]:
        if not self.username:
            return None
        return (self.username, self.password)

    @classmethod
    def from_env(cls) -> "SnapshotSourceConfig":
        """Carrega config de variáveis de ambiente."""
        return cls(
            username=os.getenv("PAYLOADSCAN_SNAPSHOT_USER", ""),
            password=os.getenv("PAYLOADSCAN_SNAPSHOT_PASSWORD", ""),
            timeout=int(os.getenv("PAYLOADSCAN_TIMEOUT", "30")),
            cache_dir=Path(os.getenv("PAYLOADSCAN_CACHE_DIR", ".cache/snapshots")),
        )


@dataclass
class AppConfig:
    """Configuração da aplicação."""

    output_dir: str = "./output"
    log_level: str = "WARNING"
    scan: ScanConfig = None
    source: SnapshotSourceConfig = None

    def __post_init__(self):
        """Inicializa valores padrão."""
        if self.scan is None:
            self.scan = ScanConfig.from_env()
        if self.source is None:
            self.source = SnapshotSourceConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Carrega config de variáveis de ambiente."""
        return cls(
            output_dir=os.getenv("PAYLOADSCAN_OUTPUT_DIR", "./output"),
            log_level=os.getenv("PAYLOADSCAN_LOG_LEVEL", "WARNING"),
            scan=ScanConfig.from_env(),
            source=SnapshotSourceConfig.from_env(),
        )


# Instância global
app_config = AppConfig()
