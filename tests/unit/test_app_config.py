"""
Unit tests for config/app_config.py

Tests configuration functionality:
- Variable resolution in config
- YAML loading
- Default values
- Environment overrides
"""

import pytest
from config.app_config import (
    resolve_vars,
    load_yaml_config,
    ensure_config_defaults,
    apply_env_overrides,
    ensure_data_dirs,
    DEFAULT_MODELS,
)


# =============================================================================
# resolve_vars Tests
# =============================================================================

def test_resolve_vars_no_variables():
    """resolve_vars returns unchanged config with no variables"""
    config = {"key": "value", "number": 42}
    result = resolve_vars(config)
    assert result == config


def test_resolve_vars_nested_keys():
    """resolve_vars handles nested key references"""
    config = {
        "app": {
            "data_dir": "/var/data"
        },
        "storage": {"profiles_file": "${app.data_dir}/ai_data.json"}
    }
    result = resolve_vars(config)
    assert result["storage"]["profiles_file"] == "/var/data/ai_data.json"


def test_resolve_vars_missing_reference():
    """resolve_vars leaves unresolvable references as-is"""
    config = {
        "path": "${nonexistent.key}/file"
    }
    result = resolve_vars(config)
    assert "${nonexistent.key}" in result["path"]


def test_resolve_vars_list_values():
    """resolve_vars processes lists"""
    config = {
        "primary": "model-a",
        "models": ["${primary}", "model-b"]
    }
    result = resolve_vars(config)
    assert result["models"] == ["model-a", "model-b"]


def test_resolve_vars_circular_reference_safety():
    """resolve_vars handles potential circular references safely"""
    config = {
        "a": "${b}",
        "b": "${a}"
    }
    result = resolve_vars(config)
    assert isinstance(result, dict)


def test_resolve_vars_non_dict_input():
    """resolve_vars returns non-dict inputs unchanged"""
    assert resolve_vars("string") == "string"
    assert resolve_vars(None) is None


# =============================================================================
# load_yaml_config Tests
# =============================================================================

def test_load_yaml_config_nonexistent_file():
    """load_yaml_config returns a dict for a nonexistent file"""
    result = load_yaml_config("totally_nonexistent_config_12345.yaml")
    assert isinstance(result, dict)


def test_load_yaml_config_with_variables(tmp_path):
    """load_yaml_config loads and resolves a valid YAML file"""
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text("""
app:
  data_dir: /srv/assistants
storage:
  chat_dir: ${app.data_dir}/chats
""")

    result = load_yaml_config(str(config_file))

    assert result["storage"]["chat_dir"] == "/srv/assistants/chats"


def test_load_yaml_config_invalid_yaml(tmp_path):
    """load_yaml_config handles invalid YAML gracefully"""
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text("{invalid yaml content [")

    result = load_yaml_config(str(config_file))

    assert result == {}


def test_load_yaml_config_non_mapping(tmp_path):
    """A YAML list at top level is rejected"""
    config_file = tmp_path / "list.yaml"
    config_file.write_text("- a\n- b\n")

    assert load_yaml_config(str(config_file)) == {}


# =============================================================================
# ensure_config_defaults Tests
# =============================================================================

def test_ensure_config_defaults_empty():
    """ensure_config_defaults fills every section"""
    result = ensure_config_defaults({})

    assert result["provider"]["models"] == DEFAULT_MODELS
    assert result["provider"]["base_url"] == "https://openrouter.ai/api/v1"
    assert result["provider"]["connect_timeout"] == 30.0
    assert result["provider"]["read_timeout"] == 30.0
    assert result["generation"] == {
        "temperature": 0.3,
        "max_tokens": 1200,
        "top_p": 0.9,
        "context_messages": 3,
    }
    assert result["profiles"]["min_purpose_length"] == 15


def test_ensure_config_defaults_storage_under_data_dir():
    """Storage files default to the data dir"""
    result = ensure_config_defaults({"app": {"data_dir": "/tmp/x"}})

    assert result["storage"]["profiles_file"].endswith("ai_data.json")
    assert result["storage"]["profiles_file"].startswith("/tmp/x")
    assert result["storage"]["banned_file"].endswith("banned_ai.json")


def test_ensure_config_defaults_replaces_unresolved_placeholders():
    """Unresolved placeholders fall back to defaults"""
    result = ensure_config_defaults({"storage": {"chat_dir": "${missing.dir}/chats"}})

    assert "${" not in result["storage"]["chat_dir"]


def test_ensure_config_defaults_preserves_existing():
    """ensure_config_defaults preserves existing values"""
    config = {
        "provider": {"models": ["only-model"]},
        "custom_key": "custom_value",
    }
    result = ensure_config_defaults(config)

    assert result["provider"]["models"] == ["only-model"]
    assert result["custom_key"] == "custom_value"


# =============================================================================
# apply_env_overrides Tests
# =============================================================================

@pytest.fixture
def defaults():
    return ensure_config_defaults({})


def test_env_api_key_override(defaults):
    """OPENROUTER_API_KEY replaces the configured key"""
    result = apply_env_overrides(defaults, {"OPENROUTER_API_KEY": "sk-test"})
    assert result["provider"]["api_key"] == "sk-test"


def test_env_models_override(defaults):
    """ASSISTANT_MODELS is parsed as an ordered comma list"""
    result = apply_env_overrides(defaults, {"ASSISTANT_MODELS": " first/model , second ,, "})
    assert result["provider"]["models"] == ["first/model", "second"]


def test_env_blank_models_ignored(defaults):
    """Blank ASSISTANT_MODELS keeps the configured list"""
    result = apply_env_overrides(defaults, {"ASSISTANT_MODELS": " , "})
    assert result["provider"]["models"] == DEFAULT_MODELS


def test_env_data_dir_moves_storage(defaults, tmp_path):
    """ASSISTANT_DATA_DIR relocates all storage files"""
    result = apply_env_overrides(defaults, {"ASSISTANT_DATA_DIR": str(tmp_path)})

    assert result["app"]["data_dir"] == str(tmp_path)
    assert result["storage"]["chat_dir"] == str(tmp_path / "chats")
    assert result["storage"]["profiles_file"] == str(tmp_path / "ai_data.json")


def test_env_empty_leaves_config(defaults):
    """No environment variables means no changes"""
    before = {k: dict(v) for k, v in defaults.items()}
    result = apply_env_overrides(defaults, {})
    assert result == before


def test_ensure_data_dirs_creates_directories(tmp_path):
    """ensure_data_dirs creates data and chat directories"""
    cfg = apply_env_overrides(ensure_config_defaults({}), {"ASSISTANT_DATA_DIR": str(tmp_path / "d")})

    ensure_data_dirs(cfg)

    assert (tmp_path / "d").is_dir()
    assert (tmp_path / "d" / "chats").is_dir()
