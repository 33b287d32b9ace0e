"""
Tests for layered configuration.

Every test passes its own env mapping, home directory and repo root, so the
developer's real environment never leaks in.

Run with:
    pytest tests/test_config.py -v
"""

import dataclasses
import json

import pytest

from aic.config import (
    Config,
    ConfigError,
    detect_provider,
    int_in_range,
    load_config,
    parse_bool,
    save_repo_instructions,
    unknown_aic_variables,
    warn_unknown_aic_variables,
)


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def repo(tmp_path):
    path = tmp_path / "repo"
    path.mkdir()
    return path


@pytest.fixture
def load(home, repo):
    """Return load_config bound to the temp home and repo."""
    def _load(env=None, **kwargs):
        return load_config(env=env or {}, home=home, repo_root=repo, **kwargs)
    return _load


def write_json(path, data):
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

class TestParsing:

    @pytest.mark.parametrize("value, expected", [
        ("1", True), ("true", True), ("YES", True), ("on", True),
        ("0", False), ("false", False), ("No", False), ("off", False),
        ("", False), (None, False), ("enabled", True),
    ])
    def test_parse_bool(self, value, expected):
        assert parse_bool(value) is expected

    @pytest.mark.parametrize("value, expected", [
        ("3", 3), ("10", 10), ("0", 5), ("11", 5), ("abc", 5), ("", 5), (None, 5), (7, 7),
    ])
    def test_int_in_range(self, value, expected):
        assert int_in_range(value, 5, 1, 10) == expected


# ---------------------------------------------------------------------------
# Config object
# ---------------------------------------------------------------------------

class TestConfig:

    @pytest.mark.parametrize("given, expected", [(0, 1), (-4, 1), (1, 1), (10, 10), (50, 10)])
    def test_suggestions_clamped(self, given, expected):
        assert Config(suggestions=given).suggestions == expected

    def test_model_defaults_per_provider(self):
        assert Config(provider="gemini").model == "gemini-1.5-flash"

    def test_validate_resets_unknown_provider(self):
        config, warnings = Config(provider="bard").validate()
        assert config.provider == "openai"
        assert config.model == "gpt-4o-mini"
        assert "Invalid provider 'bard'" in warnings[0]

    def test_validate_keeps_valid_config(self):
        config = Config(provider="claude")
        assert config.validate() == (config, [])

    def test_is_frozen(self):
        with pytest.raises(Exception):
            Config().provider = "claude"

    @pytest.mark.parametrize("provider, key", [
        ("openai", "OPENAI_API_KEY"),
        ("claude", "CLAUDE_API_KEY"),
        ("gemini", "GEMINI_API_KEY"),
    ])
    def test_missing_credentials(self, provider, key):
        with pytest.raises(ConfigError, match=f"missing {key}"):
            Config(provider=provider).require_credentials()

    @pytest.mark.parametrize("config", [
        Config(provider="custom"),
        Config(provider="openai", mock=True),
        Config(provider="claude", api_key="k"),
    ])
    def test_credentials_not_needed(self, config):
        config.require_credentials()


# ---------------------------------------------------------------------------
# Provider detection
# ---------------------------------------------------------------------------

class TestDetectProvider:

    @pytest.mark.parametrize("env, expected", [
        ({}, "openai"),
        ({"GEMINI_API_KEY": "g"}, "gemini"),
        ({"CLAUDE_API_KEY": "c", "GEMINI_API_KEY": "g"}, "claude"),
        ({"ANTHROPIC_API_KEY": "c"}, "claude"),
        ({"OPENAI_API_KEY": "o", "CLAUDE_API_KEY": "c", "GEMINI_API_KEY": "g"}, "openai"),
        ({"OPENAI_API_KEY": "   ", "GEMINI_API_KEY": "g"}, "gemini"),
    ])
    def test_priority(self, env, expected):
        assert detect_provider(env) == expected


# ---------------------------------------------------------------------------
# load_config
# ---------------------------------------------------------------------------

class TestLoadConfig:
    """load_config() layering and precedence."""

    def test_defaults(self, load):
        config = load()
        assert (config.provider, config.model, config.suggestions) == ("openai", "gpt-4o-mini", 5)
        assert config.system_addition == ""
        assert config.custom.base_url == "http://127.0.0.1:1234"

    def test_environment(self, load):
        config = load({
            "AIC_PROVIDER": "Claude",
            "AIC_MODEL": "claude-3-opus-latest",
            "AIC_SUGGESTIONS": "3",
            "CLAUDE_API_KEY": "c-key",
            "AIC_DEBUG": "1",
            "AIC_MOCK": "yes",
        })
        assert config.provider == "claude"
        assert config.model == "claude-3-opus-latest"
        assert config.suggestions == 3
        assert config.api_key == "c-key"
        assert config.debug and config.mock

    def test_anthropic_key_fallback(self, load):
        config = load({"AIC_PROVIDER": "claude", "ANTHROPIC_API_KEY": "a-key"})
        assert config.api_key == "a-key"

    @pytest.mark.parametrize("value", ["0", "11", "many"])
    def test_out_of_range_suggestions_use_default(self, load, value):
        assert load({"AIC_SUGGESTIONS": value}).suggestions == 5

    def test_non_interactive_defaults_to_one(self, load):
        config = load({"AIC_NON_INTERACTIVE": "1"})
        assert config.non_interactive
        assert config.suggestions == 1

    def test_non_interactive_can_still_ask_for_more(self, load):
        assert load({"AIC_NON_INTERACTIVE": "1", "AIC_SUGGESTIONS": "4"}).suggestions == 4

    def test_cli_flags_win(self, load):
        config = load({"AIC_PROVIDER": "gemini", "AIC_MODEL": "x", "AIC_SUGGESTIONS": "2"},
                      provider="openai", model="gpt-4.1-mini", suggestions=7)
        assert (config.provider, config.model, config.suggestions) == ("openai", "gpt-4.1-mini", 7)

    def test_cli_suggestions_clamped(self, load):
        assert load(suggestions=99).suggestions == 10

    def test_gpt5_alias(self, load):
        assert load({"AIC_MODEL": "gpt-5"}).model == "gpt-5-2025-08-07"

    def test_custom_endpoints(self, load):
        config = load({
            "AIC_PROVIDER": "custom",
            "CUSTOM_BASE_URL": "http://gpu-box:8000",
            "CUSTOM_CHAT_COMPLETIONS_PATH": "/api/chat",
            "CUSTOM_MODELS_PATH": "https://registry.test/models",
            "CUSTOM_API_KEY": "local",
        })
        assert config.model == "auto"
        assert config.api_key == "local"
        assert config.custom.url(config.custom.chat_completions_path) == "http://gpu-box:8000/api/chat"
        assert config.custom.url(config.custom.models_path) == "https://registry.test/models"

    def test_legacy_custom_paths_are_ignored(self, load):
        config = load({
            "AIC_PROVIDER": "custom",
            "CUSTOM_COMPLETIONS_PATH": "/v1/completions",
            "CUSTOM_EMBEDDINGS_PATH": "/v1/embeddings",
        })
        assert [f.name for f in dataclasses.fields(config.custom)] == [
            "base_url", "chat_completions_path", "models_path",
        ]

    def test_unknown_provider_warns_and_resets(self, load, capsys):
        config = load({"AIC_PROVIDER": "bard"})
        assert config.provider == "openai"
        assert "Invalid provider 'bard'" in capsys.readouterr().err

    def test_merges_user_and_cli_instructions(self, load, home):
        write_json(home / ".aic.json", {"instructions": "global style prefs"})
        assert load(instructions="and cli hint").system_addition == "global style prefs and cli hint"
        assert load().system_addition == "global style prefs"

    def test_cli_only_instructions(self, load):
        assert load(instructions="  use scopes ").system_addition == "use scopes"

    def test_repo_instructions_after_user(self, load, home, repo):
        write_json(home / ".aic.json", {"instructions": "user"})
        write_json(repo / ".aic.json", {"instructions": "repo", "suggestions": 3})
        config = load(instructions="cli")
        assert config.system_addition == "user repo cli"
        assert config.suggestions == 3

    def test_repo_config_can_be_disabled(self, load, repo):
        write_json(repo / ".aic.json", {"instructions": "repo"})
        assert load({"AIC_DISABLE_REPO_CONFIG": "1"}).system_addition == ""

    def test_broken_file_warns_and_is_ignored(self, load, home, capsys):
        write_json(home / ".aic.json", "{not json")
        config = load()
        assert config.system_addition == ""
        assert "cannot parse" in capsys.readouterr().err

    def test_non_object_file_is_ignored(self, load, home, capsys):
        write_json(home / ".aic.json", ["instructions"])
        assert load().system_addition == ""
        assert "expected a JSON object" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Saving and env notes
# ---------------------------------------------------------------------------

class TestSaveRepoInstructions:

    def test_creates_file(self, repo):
        path = save_repo_instructions("  Use Conventional Commits.  ", repo_root=repo)
        assert json.loads(path.read_text(encoding="utf-8")) == {"instructions": "Use Conventional Commits."}

    def test_preserves_other_keys(self, repo):
        write_json(repo / ".aic.json", {"instructions": "old", "model": "gpt-4o"})
        save_repo_instructions("new", repo_root=repo)
        data = json.loads((repo / ".aic.json").read_text(encoding="utf-8"))
        assert data == {"instructions": "new", "model": "gpt-4o"}

    def test_overwrites_broken_file(self, repo):
        write_json(repo / ".aic.json", "{broken")
        save_repo_instructions("fresh", repo_root=repo)
        assert json.loads((repo / ".aic.json").read_text(encoding="utf-8")) == {"instructions": "fresh"}


class TestUnknownVariables:

    def test_lists_only_unknown(self):
        env = {"AIC_PROVDIER": "x", "AIC_MODEL": "m", "PATH": "/bin", "AIC_NO_COLOR": "1"}
        assert unknown_aic_variables(env) == ["AIC_PROVDIER"]

    def test_warns_on_stderr(self, capsys):
        warn_unknown_aic_variables({"AIC_SUGESTIONS": "3"})
        err = capsys.readouterr().err
        assert "AIC_SUGESTIONS is not recognized" in err

    def test_silent_when_clean(self, capsys):
        warn_unknown_aic_variables({"AIC_DEBUG": "1"})
        assert capsys.readouterr().err == ""
