"""Configuration Management Package"""

import dataclasses
import json
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from aic import AicError
from aic.git import GitAnalyzer, GitError
from aic.llm import CustomEndpoints, DEFAULT_MODELS, default_model_for, resolve_model_alias

CONFIG_FILENAME = ".aic.json"

VALID_PROVIDERS = set(DEFAULT_MODELS)

DEFAULT_PROVIDER = "openai"
DEFAULT_SUGGESTIONS = 5
MAX_SUGGESTIONS = 10

# Credential variables per provider, first non-empty wins
KEY_VARIABLES = {
    "openai": ("OPENAI_API_KEY",),
    "claude": ("CLAUDE_API_KEY", "ANTHROPIC_API_KEY"),
    "gemini": ("GEMINI_API_KEY",),
    "custom": ("CUSTOM_API_KEY",),
}

# Detection order when AIC_PROVIDER is unset
DETECTION_ORDER = ("openai", "claude", "gemini")

KNOWN_AIC_VARIABLES = {
    "AIC_PROVIDER", "AIC_MODEL", "AIC_SUGGESTIONS", "AIC_MOCK", "AIC_DEBUG",
    "AIC_DEBUG_SUMMARY", "AIC_NON_INTERACTIVE", "AIC_AUTO_COMMIT", "AIC_NO_COLOR",
    "AIC_DISABLE_REPO_CONFIG",
}

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(AicError):
    """Raised when the configuration cannot produce a usable client."""
    pass


def parse_bool(value: Optional[str]) -> bool:
    """Lenient boolean: unknown non-empty values count as true."""
    value = (value or "").strip().lower()
    if value in TRUE_VALUES:
        return True
    if not value or value in FALSE_VALUES:
        return False
    return True


def int_in_range(value, default: int, lo: int, hi: int) -> int:
    """Parse an int; unset, invalid or out-of-range values give default."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < lo or number > hi:
        return default
    return number


@dataclass(frozen=True)
class Config:
    """Runtime settings, built once by load_config()."""
    provider: str = DEFAULT_PROVIDER
    model: str = ""
    suggestions: int = DEFAULT_SUGGESTIONS
    system_addition: str = ""
    api_key: str = ""
    non_interactive: bool = False
    auto_commit: bool = False
    mock: bool = False
    debug: bool = False
    debug_summary: bool = False
    custom: CustomEndpoints = field(default_factory=CustomEndpoints)

    def __post_init__(self):
        clamped = min(max(int(self.suggestions), 1), MAX_SUGGESTIONS)
        object.__setattr__(self, "suggestions", clamped)
        if not self.model:
            object.__setattr__(self, "model", default_model_for(self.provider))

    @property
    def key_name(self) -> str:
        return KEY_VARIABLES.get(self.provider, KEY_VARIABLES[DEFAULT_PROVIDER])[0]

    def validate(self) -> tuple['Config', list[str]]:
        """Return a corrected copy of this config and the warnings explaining it."""
        warnings = []
        config = self

        if config.provider not in VALID_PROVIDERS:
            warnings.append(f"Invalid provider '{config.provider}', using '{DEFAULT_PROVIDER}'")
            config = dataclasses.replace(config, provider=DEFAULT_PROVIDER,
                                         model=default_model_for(DEFAULT_PROVIDER))

        return config, warnings

    def require_credentials(self) -> None:
        """Fail unless the provider has what it needs to make a request."""
        if self.mock or self.provider == "custom":
            return
        if not self.api_key:
            raise ConfigError(f"missing {self.key_name}")


def _env_value(env: Mapping[str, str], *names: str) -> str:
    for name in names:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return ""


def detect_provider(env: Mapping[str, str]) -> str:
    """Pick a provider from whichever API key is set."""
    for provider in DETECTION_ORDER:
        if _env_value(env, *KEY_VARIABLES[provider]):
            return provider
    return DEFAULT_PROVIDER


def unknown_aic_variables(env: Mapping[str, str]) -> list[str]:
    return sorted(k for k in env if k.startswith("AIC_") and k not in KNOWN_AIC_VARIABLES)


def warn_unknown_aic_variables(env: Mapping[str, str]) -> None:
    """Point out AIC_* variables that look like typos."""
    unknown = unknown_aic_variables(env)
    if not unknown:
        return
    print("[aic] Notes about environment variables:", file=sys.stderr)
    for name in unknown:
        print(f"  - {name} is not recognized; check for typos or remove it.", file=sys.stderr)


def _load_json(path: Path) -> dict:
    """Read a config file. Missing files are silent; broken ones warn."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (json.JSONDecodeError, OSError) as e:
        print(f"[aic] warning: cannot parse {path}: {e}", file=sys.stderr)
        return {}
    if not isinstance(data, dict):
        print(f"[aic] warning: cannot parse {path}: expected a JSON object", file=sys.stderr)
        return {}
    return data


def find_repo_root() -> Optional[Path]:
    try:
        root = GitAnalyzer(verify=False).repo_root()
    except GitError:
        return None
    return Path(root) if root else None


def _custom_endpoints(env: Mapping[str, str]) -> CustomEndpoints:
    defaults = CustomEndpoints()
    return CustomEndpoints(
        base_url=_env_value(env, "CUSTOM_BASE_URL") or defaults.base_url,
        chat_completions_path=_env_value(env, "CUSTOM_CHAT_COMPLETIONS_PATH") or defaults.chat_completions_path,
        models_path=_env_value(env, "CUSTOM_MODELS_PATH") or defaults.models_path,
    )


def load_config(instructions: str = "",
                provider: Optional[str] = None,
                model: Optional[str] = None,
                suggestions: Optional[int] = None,
                non_interactive: Optional[bool] = None,
                debug: Optional[bool] = None,
                env: Optional[Mapping[str, str]] = None,
                home: Optional[Path] = None,
                repo_root: Optional[Path] = None) -> Config:
    """Merge defaults, ~/.aic.json, the repo .aic.json, the environment and CLI flags.

    Later sources win. Instructions are the exception: every non-empty
    source contributes, joined by a space.
    """
    env = os.environ if env is None else env

    user_file = _load_json((home or Path.home()) / CONFIG_FILENAME)
    repo_file = {}
    if not parse_bool(env.get("AIC_DISABLE_REPO_CONFIG")):
        root = repo_root or find_repo_root()
        if root is not None:
            repo_file = _load_json(Path(root) / CONFIG_FILENAME)

    files = {**user_file, **repo_file}

    # Provider: CLI > env > file > key detection
    chosen = (provider or _env_value(env, "AIC_PROVIDER") or str(files.get("provider") or "")).strip().lower()
    if not chosen:
        chosen = detect_provider(env)

    is_non_interactive = parse_bool(env.get("AIC_NON_INTERACTIVE")) if non_interactive is None else non_interactive

    count = int_in_range(files.get("suggestions"), DEFAULT_SUGGESTIONS, 1, MAX_SUGGESTIONS)
    if is_non_interactive:
        count = 1
    count = int_in_range(env.get("AIC_SUGGESTIONS"), count, 1, MAX_SUGGESTIONS)
    if suggestions is not None:
        count = suggestions

    parts = [
        str(user_file.get("instructions") or "").strip(),
        str(repo_file.get("instructions") or "").strip(),
        (instructions or "").strip(),
    ]

    config = Config(
        provider=chosen,
        model=(model or _env_value(env, "AIC_MODEL") or str(files.get("model") or "")).strip(),
        suggestions=count,
        system_addition=" ".join(p for p in parts if p),
        non_interactive=is_non_interactive,
        auto_commit=parse_bool(env.get("AIC_AUTO_COMMIT")),
        mock=parse_bool(env.get("AIC_MOCK")),
        debug=parse_bool(env.get("AIC_DEBUG")) if debug is None else debug,
        debug_summary=parse_bool(env.get("AIC_DEBUG_SUMMARY")),
        custom=_custom_endpoints(env),
    )

    config, warnings = config.validate()
    for warning in warnings:
        print(f"Config warning: {warning}", file=sys.stderr)

    return dataclasses.replace(
        config,
        model=resolve_model_alias(config.provider, config.model),
        api_key=_env_value(env, *KEY_VARIABLES[config.provider]),
    )


def save_repo_instructions(instructions: str, repo_root: Optional[Path] = None) -> Path:
    """Write the instructions field of the repo .aic.json, keeping other keys."""
    root = repo_root or find_repo_root()
    if root is None:
        raise ConfigError("not a git repository; cannot locate repo root")

    path = Path(root) / CONFIG_FILENAME
    existing = {}
    if path.exists():
        try:
            with open(path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                existing = loaded
        except (json.JSONDecodeError, OSError):
            existing = {}

    existing["instructions"] = instructions.strip()
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(existing, f, indent=2)
        f.write('\n')
    return path


__all__ = [
    "Config",
    "ConfigError",
    "CONFIG_FILENAME",
    "VALID_PROVIDERS",
    "KEY_VARIABLES",
    "load_config",
    "save_repo_instructions",
    "detect_provider",
    "parse_bool",
    "int_in_range",
    "warn_unknown_aic_variables",
    "unknown_aic_variables",
]
