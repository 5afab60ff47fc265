import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from dotenv import load_dotenv

from chat_proxy.prompts.assistant_prompt import ASSISTANT_SYSTEM_PROMPT
from chat_proxy.tiers import ComplexityTier, default_model_table


def find_project_root(start: Path) -> Path:
    for parent in [start, *start.parents]:
        if (parent / "pyproject.toml").exists():
            return parent
    # installed outside a checkout: look for .env in the working directory
    return Path.cwd()


PROJECT_ROOT = find_project_root(Path(__file__).resolve())

ENV_PATH = PROJECT_ROOT / ".env"

API_KEY_ENV = "OPENROUTER_API_KEY"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_REFERER = "https://valure.io"
DEFAULT_TITLE = "Valure AI Assistant"
DEFAULT_TIMEOUT_SECONDS = 30.0

MODEL_ENV_VARS: Mapping[ComplexityTier, str] = {
    ComplexityTier.SIMPLE: "CHAT_MODEL_SIMPLE",
    ComplexityTier.MEDIUM: "CHAT_MODEL_MEDIUM",
    ComplexityTier.COMPLEX: "CHAT_MODEL_COMPLEX",
}


def load_env() -> bool:
    """
    Load the project .env when one exists. Real environment variables win.
    """

    if not ENV_PATH.exists():
        return False
    return load_dotenv(ENV_PATH, override=False)


@dataclass(frozen=True)
class ProxySettings:
    """
    Immutable configuration injected into the chat handler.
    """

    api_key: Optional[str] = field(default=None, repr=False)
    models: Mapping[ComplexityTier, str] = field(default_factory=lambda: MappingProxyType(default_model_table()))
    system_prompt: str = ASSISTANT_SYSTEM_PROMPT
    base_url: str = DEFAULT_BASE_URL
    referer: str = DEFAULT_REFERER
    title: str = DEFAULT_TITLE
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    max_tokens: int = 300
    temperature: float = 0.7
    max_message_chars: int = 500
    history_window: int = 6

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def completions_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"

    def model_for(self, tier: ComplexityTier) -> str:
        return self.models[tier]


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ProxySettings:
    """
    Build settings from the process environment (or an explicit mapping in tests).
    """

    env = os.environ if environ is None else environ

    models = default_model_table()
    models.update(load_model_overrides(env.get("CHAT_MODEL_TABLE_FILE")))
    for tier, var in MODEL_ENV_VARS.items():
        override = (env.get(var) or "").strip()
        if override:
            models[tier] = override

    return ProxySettings(
        api_key=(env.get(API_KEY_ENV) or "").strip() or None,
        models=MappingProxyType(models),
        base_url=env.get("OPENROUTER_BASE_URL") or DEFAULT_BASE_URL,
        referer=env.get("OPENROUTER_REFERER") or DEFAULT_REFERER,
        title=env.get("OPENROUTER_TITLE") or DEFAULT_TITLE,
        timeout=_parse_timeout(env.get("OPENROUTER_TIMEOUT")),
    )


def load_model_overrides(path_value: Optional[str]) -> dict[ComplexityTier, str]:
    """
    Load a JSON object mapping tier names to model ids.
    Returns an empty mapping when no file is configured.
    """

    if not path_value:
        return {}
    path = Path(path_value)
    if not path.exists():
        raise FileNotFoundError(f"Model table file missing: {path}")

    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"Failed to parse model table file {path}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Model table file {path} must contain a JSON object")

    overrides: dict[ComplexityTier, str] = {}
    for raw_key, value in data.items():
        key = str(raw_key).strip().lower()
        if key not in ComplexityTier._value2member_map_:
            raise ValueError(f"Unknown tier '{raw_key}' in {path}")
        if not value:
            continue
        overrides[ComplexityTier(key)] = str(value)
    return overrides


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"OPENROUTER_TIMEOUT must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ValueError("OPENROUTER_TIMEOUT must be positive")
    return value


if __name__ == "__main__":
    print(f"Project root: {PROJECT_ROOT}")
    print(f"Env path: {ENV_PATH}")

    load_env()
    settings = load_settings()
    print(f"API key configured: {settings.has_api_key}")
    for tier, model in settings.models.items():
        print(f"{tier.value}: {model}")
