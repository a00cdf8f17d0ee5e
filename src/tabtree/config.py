import os
import yaml
from pathlib import Path

CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "tabtree.yml"
CONFIG_ENV_VAR = "TABTREE_CONFIG"

class TTConfig:
    def __init__(self, data):
        self.paths = data.get("paths", {})
        self.logging = data.get("logging", {})
        self.defaults = data.get("defaults", {})
        self.debug = data.get("debug", False)

    @property
    def default_delimiter(self) -> str:
        return self.defaults.get("delimiter", "\t")

    @property
    def default_mode(self) -> str:
        return self.defaults.get("mode", "parent")

def load_config() -> 'TTConfig':
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
    else:
        path = CONFIG_PATH
        if not path.exists():
            # Installed without the repository's config/ directory
            return TTConfig({})

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return TTConfig(data)

_config_cache = None

def get_config() -> 'TTConfig':
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache
