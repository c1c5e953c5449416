"""Pipeline configuration and environment setup."""

from dataclasses import dataclass, field, replace
from pathlib import Path

from psc_pipeline.utils.io import load_toml_config

type ConfigDict = dict[str, str | int | bool | list[str]]

PROJECT_ROOT = Path(__file__).parent.parent


@dataclass(frozen=True)
class SourceConfig:
    path: str
    delimiter: str = ","
    encoding: str = "utf-8"


@dataclass(frozen=True)
class AnalyticsConfig:
    common_limit: int = 10
    search_limit: int = 10
    detention_preview: int = 5
    port_ranking: int = 5


@dataclass(frozen=True)
class PipelineConfig:
    source: SourceConfig
    report_dir: Path
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)


def load_pipeline_config(env: str = "production", overrides: ConfigDict | None = None) -> PipelineConfig:
    """Build the config for ``env``, then apply ``[tool.psc]`` overrides."""
    match env:
        case "production":
            source = SourceConfig(path=str(PROJECT_ROOT / "data" / "PSC consolidated1.csv"))
            report_dir = PROJECT_ROOT / "reports"
        case "staging":
            source = SourceConfig(path=str(PROJECT_ROOT / "data" / "staging" / "PSC consolidated1.csv"))
            report_dir = PROJECT_ROOT / "reports" / "staging"
        case "development":
            source = SourceConfig(path=str(PROJECT_ROOT / "data" / "sample" / "psc_sample.csv"))
            report_dir = PROJECT_ROOT / "reports" / "dev"
        case other:
            raise ValueError(f"Unknown environment: {other}")

    config = PipelineConfig(source=source, report_dir=report_dir)
    settings = get_env_config() if overrides is None else overrides
    return _apply_overrides(config, settings)


def _apply_overrides(config: PipelineConfig, settings: ConfigDict) -> PipelineConfig:
    source = config.source
    analytics = config.analytics
    report_dir = config.report_dir

    for key, value in settings.items():
        match key:
            case "source_path":
                source = replace(source, path=str(value))
            case "delimiter" | "encoding":
                source = replace(source, **{key: str(value)})
            case "common_limit" | "search_limit" | "detention_preview" | "port_ranking":
                analytics = replace(analytics, **{key: int(value)})
            case "report_dir":
                report_dir = Path(str(value))
            case unknown:
                raise ValueError(f"Unknown [tool.psc] setting: {unknown}")

    return PipelineConfig(source=source, report_dir=report_dir, analytics=analytics)


def get_env_config() -> ConfigDict:
    """Read pipeline config from pyproject.toml."""
    pyproject = PROJECT_ROOT / "pyproject.toml"
    if not pyproject.exists():
        return {}
    data = load_toml_config(pyproject)
    return data.get("tool", {}).get("psc", {})
