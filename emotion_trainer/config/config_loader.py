"""Configuration loader for emotion_trainer"""

import yaml
from pathlib import Path
from typing import Any, Dict
import os


PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Config:
    """Configuration manager for emotion_trainer"""

    def __init__(self, config_path: str = None):
        if config_path is None:
            env = os.getenv('EMOTION_TRAINER_ENV', 'development')
            # Try environment-specific config first, fall back to default
            config_path = self._resolve(f"config/config.{env}.yaml")
            if not config_path.exists():
                config_path = self._resolve("config/config.yaml")

        self.config_path = Path(config_path)
        self._config = self._load_config()

    @staticmethod
    def _resolve(relative: str) -> Path:
        """Resolve a config path against the working directory, then the project root"""
        path = Path(relative)
        if path.exists():
            return path
        return PROJECT_ROOT / relative

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file"""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            return yaml.safe_load(f) or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation

        Args:
            key: Configuration key in dot notation (e.g., 'estimator.target_fps')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access"""
        return self.get(key)

    def resolve_path(self, key: str, default: str = None) -> Path:
        """Get a path-valued setting, relative paths taken from the project root"""
        value = self.get(key, default)
        if value is None:
            return None
        path = Path(value)
        if not path.is_absolute() and not path.exists():
            path = PROJECT_ROOT / path
        return path

    def validate(self) -> None:
        """Validate configuration values"""
        fps = self.get('estimator.target_fps')
        if fps is not None and fps <= 0:
            raise ValueError(f"Invalid target_fps: {fps}, must be positive")

        for key in ('estimator.min_face_detection_confidence', 'estimator.min_tracking_confidence'):
            value = self.get(key)
            if value is not None and not 0 <= value <= 1:
                raise ValueError(f"Invalid {key}: {value}, must be in [0, 1]")

        preset = self.get('emotion.weight_preset')
        if preset is not None and preset not in ('tuned', 'basic'):
            raise ValueError(f"Unknown weight_preset: {preset}")

        epsilon = self.get('emotion.neutral_epsilon')
        if epsilon is not None and epsilon <= 0:
            raise ValueError(f"Invalid neutral_epsilon: {epsilon}, must be positive")


# Global config instance
config = Config()
