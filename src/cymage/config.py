"""Configuration management for cymage.

Configuration is an explicit value passed to every component, never
process-wide state, so a run can be driven with any injected settings.
"""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import CONFIG_DIR_NAME, GENERATION_TIMEOUT, REFERENCE_SEARCH_DEPTH


class ConfigError(Exception):
    """Configuration is invalid or incomplete for the requested run."""

    pass


class ProviderConfig(BaseModel):
    """Connection details for one chat-completions backend."""

    endpoint: str
    token_env: str  # Environment variable holding the bearer token
    label: str = ""  # Human-readable name for progress output


def _default_providers() -> dict[str, ProviderConfig]:
    return {
        "github": ProviderConfig(
            endpoint="https://models.inference.ai.azure.com/chat/completions",
            token_env="GITHUB_TOKEN",
            label="GitHub Models",
        ),
        "openai": ProviderConfig(
            endpoint="https://api.openai.com/v1/chat/completions",
            token_env="OPENAI_API_KEY",
            label="OpenAI",
        ),
    }


class BackendConfig(BaseModel):
    """Generation backend selection and request parameters."""

    provider: str = "github"
    model: str = "gpt-4o"
    temperature: float = 0.3
    max_tokens: int = 2000
    timeout: int = GENERATION_TIMEOUT
    providers: dict[str, ProviderConfig] = Field(default_factory=_default_providers)

    def get_provider(self) -> ProviderConfig:
        """Get connection details for the selected provider.

        Raises:
            ConfigError: If the provider name is not configured
        """
        try:
            return self.providers[self.provider]
        except KeyError:
            known = ", ".join(sorted(self.providers))
            raise ConfigError(
                f"Unknown provider '{self.provider}' (expected one of: {known})"
            ) from None


class KohaConfig(BaseModel):
    """Project checkout used to resolve script references, and the running site."""

    path: Path = Field(default_factory=lambda: Path.home() / "Koha")
    host: str = "http://localhost:8081"
    # Searched in order when a reference is not found verbatim under path
    search_dirs: list[str] = Field(
        default=[
            "koha-tmpl/intranet-tmpl/prog/en/modules",
            "koha-tmpl/opac-tmpl/bootstrap/en/modules",
            "members",
            "acqui",
            "cataloguing",
            "circ",
            "admin",
            "tools",
            "reports",
            "svc",
            "opac",
            "api",
        ]
    )
    search_depth: int = REFERENCE_SEARCH_DEPTH


class GenerationConfig(BaseModel):
    """Batching and output placement."""

    max_files_per_batch: int = Field(default=1, ge=1)
    output_dir: str = "t/cypress/integration/Generated"


class CymageConfig(BaseModel):
    """Root configuration for cymage."""

    backend: BackendConfig = Field(default_factory=BackendConfig)
    koha: KohaConfig = Field(default_factory=KohaConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)

    def default_output_path(self, bug_number: str) -> Path:
        """Spec file path used when no output is given."""
        return self.koha.path / self.generation.output_dir / f"Bug{bug_number}_spec.ts"

    def with_overrides(
        self,
        *,
        provider: str | None = None,
        model: str | None = None,
        host: str | None = None,
        koha_path: Path | None = None,
    ) -> "CymageConfig":
        """Return a copy with command-line overrides applied."""
        backend_updates: dict[str, object] = {}
        if provider:
            backend_updates["provider"] = provider
        if model:
            backend_updates["model"] = model
        koha_updates: dict[str, object] = {}
        if host:
            koha_updates["host"] = host
        if koha_path:
            koha_updates["path"] = koha_path
        return self.model_copy(
            update={
                "backend": self.backend.model_copy(update=backend_updates),
                "koha": self.koha.model_copy(update=koha_updates),
            }
        )


def get_config_dir(base: Path) -> Path:
    """Get the .cymage directory under base."""
    return base / CONFIG_DIR_NAME


def load_config(config_dir: Path) -> CymageConfig:
    """Load config from .cymage/config.toml.

    Args:
        config_dir: Path to .cymage directory

    Returns:
        Loaded configuration, or defaults if config.toml doesn't exist

    Raises:
        ConfigError: If config.toml is not valid TOML or has invalid values
    """
    config_path = config_dir / "config.toml"
    if not config_path.exists():
        return CymageConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return CymageConfig.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e


def write_config_template(config_dir: Path) -> Path:
    """Write default config.toml template.

    Args:
        config_dir: Path to .cymage directory

    Returns:
        Path to the written config file
    """
    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.toml"
    defaults = CymageConfig()
    template = {
        "backend": {
            "provider": defaults.backend.provider,
            "model": defaults.backend.model,
            "temperature": defaults.backend.temperature,
            "max_tokens": defaults.backend.max_tokens,
            "timeout": defaults.backend.timeout,
        },
        "koha": {
            "path": str(defaults.koha.path),
            "host": defaults.koha.host,
            "search_dirs": defaults.koha.search_dirs,
        },
        "generation": {
            "max_files_per_batch": defaults.generation.max_files_per_batch,
            "output_dir": defaults.generation.output_dir,
        },
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
