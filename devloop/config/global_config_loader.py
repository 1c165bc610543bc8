import yaml
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field


@dataclass
class BuildConfig:
    """Local build configuration"""
    push: Optional[bool] = None  # None: push unless the cluster is local
    kube_context: str = ""
    local_cluster: Optional[bool] = None  # None: infer from kube_context
    skip_tests: bool = False
    prune: bool = True
    insecure_registries: List[str] = field(default_factory=list)

    def insecure_registry_map(self) -> Dict[str, bool]:
        return {registry: True for registry in self.insecure_registries}


@dataclass
class WatchConfig:
    """Watch loop configuration"""
    trigger: str = "polling"  # "polling" | "notify"
    poll_interval: float = 1.0
    debounce: float = 0.5


@dataclass
class GlobalConfig:
    """Global configuration for the dev loop"""
    build: BuildConfig
    watch: WatchConfig
    artifacts: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GlobalConfig':
        """Create GlobalConfig from dictionary"""
        return cls(
            build=BuildConfig(**(data.get('build') or {})),
            watch=WatchConfig(**(data.get('watch') or {})),
            artifacts=list(data.get('artifacts') or [])
        )

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'GlobalConfig':
        """Load GlobalConfig from YAML file"""
        path = Path(yaml_path)
        if not path.exists():
            # Return default config if file doesn't exist
            return cls.default()

        with open(path, 'r') as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_text(cls, text: str) -> 'GlobalConfig':
        """Parse GlobalConfig from YAML text"""
        return cls.from_dict(yaml.safe_load(text) or {})

    @classmethod
    def default(cls) -> 'GlobalConfig':
        """Return default configuration"""
        return cls(
            build=BuildConfig(),
            watch=WatchConfig(),
        )


def load_global_config(config_path: Optional[str] = None) -> GlobalConfig:
    """
    Load global configuration from YAML file.
    If no path provided, looks for devloop.yaml in standard locations.
    """
    if config_path:
        return GlobalConfig.from_yaml(config_path)

    # Try standard locations
    search_paths = [
        Path("./devloop.yaml"),
        Path("./devloop.yml"),
        Path("./config/devloop.yaml"),
    ]

    for path in search_paths:
        if path.exists():
            return GlobalConfig.from_yaml(str(path))

    # Return default if no config found
    return GlobalConfig.default()
