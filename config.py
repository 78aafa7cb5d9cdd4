"""Configuração da aplicação."""
import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class ManifestSourceConfig:
    """Configuração de acesso aos manifestos remotos."""

    timeout: int = 30
    auth_token: Optional[str] = None  # Enviado como bearer token

    @classmethod
    def from_env(cls) -> "ManifestSourceConfig":
        """Carrega config de variáveis de ambiente."""
        return cls(
            timeout=int(os.getenv("ROUTEDOC_MANIFEST_TIMEOUT", "30")),
            auth_token=os.getenv("ROUTEDOC_MANIFEST_TOKEN") or None,
        )


@dataclass
class AppConfig:
    """Configuração da aplicação."""

    schema_type: str = "oas3"
    nullable_strategy: Optional[str] = None
    output_dir: str = "./output"  # Destino de --output sem diretório
    title: str = "API"
    version: str = "1"
    log_level: str = "INFO"
    manifest: ManifestSourceConfig = None

    def __post_init__(self):
        """Inicializa valores padrão."""
        if self.manifest is None:
            self.manifest = ManifestSourceConfig.from_env()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Carrega config de variáveis de ambiente."""
        return cls(
            schema_type=os.getenv("ROUTEDOC_SCHEMA_TYPE", "oas3"),
            nullable_strategy=os.getenv("ROUTEDOC_NULLABLE_STRATEGY") or None,
            output_dir=os.getenv("ROUTEDOC_OUTPUT_DIR", "./output"),
            title=os.getenv("ROUTEDOC_TITLE", "API"),
            version=os.getenv("ROUTEDOC_VERSION", "1"),
            log_level=os.getenv("ROUTEDOC_LOG_LEVEL", "INFO"),
            manifest=ManifestSourceConfig.from_env(),
        )


# Instância global
app_config = AppConfig.from_env()
