"""
# config/app_config.py

Module Contract
- Purpose: Central configuration loader/normalizer. Reads YAML (optional), merges env overrides, sets defaults, and exposes module-level constants for storage paths, provider access and generation knobs.
- Inputs:
  - Optional YAML (config.yaml) at several search paths
  - Environment variables (OPENROUTER_API_KEY, ASSISTANT_MODELS, ASSISTANT_DATA_DIR, ASSISTANT_BASE_URL)
- Outputs:
  - Module-level constants: DATA_DIR, PROFILES_FILE, BANNED_FILE, CHAT_DIR, PROVIDER_*, DEFAULT_* generation knobs, MIN_PURPOSE_LENGTH
- Key functions:
  - load_yaml_config(config_path) → dict: tolerant loader with variable resolution
  - ensure_config_defaults(config) → dict: fills missing defaults
  - apply_env_overrides(config, environ) → dict: environment wins over YAML
  - ensure_data_dirs(): creates storage directories (called by the entrypoint)
- Error handling:
  - Logs and falls back to safe defaults if files/vars are missing.
"""
import os
import re
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from utils.logging_utils import get_logger

logger = get_logger("config")

# --------------------------------------------------------------------
# Variable resolution
# --------------------------------------------------------------------

def resolve_vars(config: dict) -> dict:
    """
    Recursively resolves placeholder variables in the config like ${section.key}.
    """
    if not isinstance(config, dict):
        return config

    def get_value_by_path(path: str, conf_dict: dict):
        keys = path.split(".")
        value = conf_dict
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return None
        return value

    def resolve_value(value, conf_dict):
        if isinstance(value, str):
            pattern = r"\$\{([^}]+)\}"
            matches = re.findall(pattern, value)
            for match in matches:
                replacement = get_value_by_path(match, conf_dict)
                if replacement is not None:
                    value = value.replace(f"${{{match}}}", str(replacement))
            return value
        elif isinstance(value, dict):
            return {k: resolve_value(v, conf_dict) for k, v in value.items()}
        elif isinstance(value, list):
            return [resolve_value(item, conf_dict) for item in value]
        else:
            return value

    # Multiple passes to resolve nested references
    for _ in range(5):
        prev = str(config)
        config = resolve_value(config, config)
        if str(config) == prev:
            break

    return config

# --------------------------------------------------------------------
# YAML loading
# --------------------------------------------------------------------

def load_yaml_config(config_path="config.yaml"):
    """Load configuration from YAML file with variable substitution."""
    paths_to_try = list(dict.fromkeys([
        Path(config_path),
        Path(__file__).parent / config_path,
        Path(__file__).parent.parent / config_path,
        Path.cwd() / config_path,
    ]))

    config = {}
    for path in paths_to_try:
        if path.exists():
            logger.info(f"Loading config from: {path}")
            try:
                with open(path, "r", encoding="utf-8") as f:
                    config = yaml.safe_load(f)
                if not isinstance(config, dict):
                    logger.error("Config file is not a valid dictionary.")
                    config = {}
                break
            except (OSError, yaml.YAMLError) as e:
                logger.error(f"Error loading config: {e}")
                config = {}

    if not config:
        logger.warning(f"Config file not found in any of: {paths_to_try}, using defaults.")

    return resolve_vars(config)

# --------------------------------------------------------------------
# Defaults
# --------------------------------------------------------------------

DEFAULT_MODELS = ["nvidia/nemotron-nano-9b-v2:free", "gpt-3.5-turbo"]
DEFAULT_INVALID_MODEL_MARKERS = ["not a valid model", "invalid model", "model id"]


def ensure_config_defaults(config):
    """Ensure config values have defaults after resolution."""
    app = config.setdefault("app", {})
    app.setdefault("data_dir", "./data")
    app.setdefault("log_file", "assistants_debug.log")

    storage = config.setdefault("storage", {})
    for key, filename in (
        ("profiles_file", "ai_data.json"),
        ("banned_file", "banned_ai.json"),
        ("chat_dir", "chats"),
    ):
        existing = storage.get(key)
        # Unresolved placeholders fall back to the data dir
        if not existing or "${" in str(existing):
            storage[key] = os.path.join(app["data_dir"], filename)

    provider = config.setdefault("provider", {})
    provider.setdefault("base_url", "https://openrouter.ai/api/v1")
    provider.setdefault("api_key", "")
    provider.setdefault("models", list(DEFAULT_MODELS))
    provider.setdefault("connect_timeout", 30.0)
    provider.setdefault("read_timeout", 30.0)
    provider.setdefault("invalid_model_markers", list(DEFAULT_INVALID_MODEL_MARKERS))

    generation = config.setdefault("generation", {})
    generation.setdefault("temperature", 0.3)
    generation.setdefault("max_tokens", 1200)
    generation.setdefault("top_p", 0.9)
    generation.setdefault("context_messages", 3)

    profiles = config.setdefault("profiles", {})
    profiles.setdefault("min_purpose_length", 15)

    return config


def apply_env_overrides(config: dict, environ: Optional[Mapping[str, str]] = None) -> dict:
    """Environment variables take precedence over YAML values."""
    env = os.environ if environ is None else environ

    api_key = env.get("OPENROUTER_API_KEY")
    if api_key:
        config["provider"]["api_key"] = api_key

    base_url = env.get("ASSISTANT_BASE_URL")
    if base_url:
        config["provider"]["base_url"] = base_url

    models = env.get("ASSISTANT_MODELS")
    if models:
        parsed = [m.strip() for m in models.split(",") if m.strip()]
        if parsed:
            config["provider"]["models"] = parsed

    data_dir = env.get("ASSISTANT_DATA_DIR")
    if data_dir:
        config["app"]["data_dir"] = data_dir
        config["storage"]["profiles_file"] = os.path.join(data_dir, "ai_data.json")
        config["storage"]["banned_file"] = os.path.join(data_dir, "banned_ai.json")
        config["storage"]["chat_dir"] = os.path.join(data_dir, "chats")

    return config

# --------------------------------------------------------------------
# Main Loading Sequence (only load once!)
# --------------------------------------------------------------------

logger.info("Loading configuration...")
config = load_yaml_config("config.yaml")
config = ensure_config_defaults(config)
config = apply_env_overrides(config)

DATA_DIR = config["app"]["data_dir"]
LOG_FILE = config["app"]["log_file"]
PROFILES_FILE = config["storage"]["profiles_file"]
BANNED_FILE = config["storage"]["banned_file"]
CHAT_DIR = config["storage"]["chat_dir"]

PROVIDER_BASE_URL = config["provider"]["base_url"].rstrip("/")
PROVIDER_API_KEY = config["provider"]["api_key"]
PROVIDER_MODELS = list(config["provider"]["models"])
CONNECT_TIMEOUT = float(config["provider"]["connect_timeout"])
READ_TIMEOUT = float(config["provider"]["read_timeout"])
INVALID_MODEL_MARKERS = [m.lower() for m in config["provider"]["invalid_model_markers"]]

DEFAULT_TEMPERATURE = float(config["generation"]["temperature"])
DEFAULT_MAX_TOKENS = int(config["generation"]["max_tokens"])
DEFAULT_TOP_P = float(config["generation"]["top_p"])
CONTEXT_MESSAGES = int(config["generation"]["context_messages"])

MIN_PURPOSE_LENGTH = int(config["profiles"]["min_purpose_length"])


def ensure_data_dirs(cfg: Optional[Dict] = None) -> None:
    """Create storage directories if needed."""
    cfg = cfg or config
    Path(cfg["app"]["data_dir"]).mkdir(parents=True, exist_ok=True)
    Path(cfg["storage"]["chat_dir"]).mkdir(parents=True, exist_ok=True)
    Path(cfg["storage"]["profiles_file"]).parent.mkdir(parents=True, exist_ok=True)
    Path(cfg["storage"]["banned_file"]).parent.mkdir(parents=True, exist_ok=True)


logger.info(f"Using PROFILES_FILE={PROFILES_FILE}")
logger.info(f"Using CHAT_DIR={CHAT_DIR}")
logger.info(f"Provider models: {PROVIDER_MODELS}")
if not PROVIDER_API_KEY:
    logger.warning("No provider API key configured (set OPENROUTER_API_KEY)")
