"""
Configuration management for s3wal.

Handles loading and merging configuration from:
- Default configuration file
- An optional override file
- Environment variables
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


class Config:
    """Configuration manager for s3wal."""
    
    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.
        
        Args:
            config_file: Path to an override file, merged over the defaults
        """
        self._config: Dict[str, Any] = {}
        self._load_default_config()
        
        if config_file:
            self._load_config_file(config_file)
        
        self._apply_env_overrides()
    
    def _load_default_config(self) -> None:
        """Load default configuration."""
        default_config_path = Path(__file__).parent.parent.parent / "config" / "default.yaml"
        if default_config_path.exists():
            self._load_config_file(str(default_config_path))
    
    def _load_config_file(self, config_file: str) -> None:
        with open(config_file, "r") as f:
            file_config = yaml.safe_load(f) or {}
            self._config = self._deep_merge(self._config, file_config)
    
    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Deep merge two dictionaries.
        
        Args:
            base: Base dictionary
            override: Override dictionary
        
        Returns:
            Merged dictionary
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result
    
    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        if bucket := os.getenv("WAL_BUCKET"):
            self.set("wal.bucket", bucket)
        
        if prefix := os.getenv("WAL_PREFIX"):
            self.set("wal.prefix", prefix)
        
        if endpoint_url := os.getenv("S3_ENDPOINT_URL"):
            self.set("s3.endpoint_url", endpoint_url)
        
        if region := os.getenv("S3_REGION"):
            self.set("s3.region", region)
        
        if log_level := os.getenv("LOG_LEVEL"):
            self.set("logging.level", log_level)
    
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.
        
        Args:
            key: Configuration key in dot notation (e.g., "wal.prefix")
            default: Default value if key not found
        
        Returns:
            Configuration value
        """
        value = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
    
    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.
        
        Args:
            key: Configuration key in dot notation
            value: Value to set
        """
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value
    
    def to_dict(self) -> Dict[str, Any]:
        return self._config.copy()


@dataclass
class WALConfig:
    """
    Settings for one write-ahead log and the S3 endpoint backing it.
    
    Attributes:
        bucket: Bucket holding the log objects
        prefix: Key prefix of the log
        endpoint_url: S3-compatible endpoint (None = AWS default)
        region: Region name passed to the client
        connect_timeout_s: Connection timeout per request
        read_timeout_s: Read timeout per request
        max_attempts: Total attempts made by botocore's retry handler
        retry_mode: botocore retry mode (legacy, standard, adaptive)
    """
    bucket: str = "wal"
    prefix: str = "wal"
    endpoint_url: Optional[str] = None
    region: str = "us-east-1"
    connect_timeout_s: float = 5
    read_timeout_s: float = 30
    max_attempts: int = 5
    retry_mode: str = "standard"
    
    @classmethod
    def from_config(cls, config: Config) -> "WALConfig":
        """Build settings from a Config, falling back to field defaults."""
        defaults = cls()
        return cls(
            bucket=config.get("wal.bucket", defaults.bucket),
            prefix=config.get("wal.prefix", defaults.prefix),
            endpoint_url=config.get("s3.endpoint_url", defaults.endpoint_url),
            region=config.get("s3.region", defaults.region),
            connect_timeout_s=config.get("s3.connect_timeout_s", defaults.connect_timeout_s),
            read_timeout_s=config.get("s3.read_timeout_s", defaults.read_timeout_s),
            max_attempts=config.get("s3.max_attempts", defaults.max_attempts),
            retry_mode=config.get("s3.retry_mode", defaults.retry_mode),
        )


# Global configuration instance
_config: Optional[Config] = None


def get_config(config_file: Optional[str] = None) -> Config:
    """
    Get global configuration instance.
    
    Args:
        config_file: Optional configuration file path
    
    Returns:
        Configuration instance
    """
    global _config
    if _config is None:
        _config = Config(config_file)
    return _config


def reset_config() -> None:
    """Reset global configuration (mainly for testing)."""
    global _config
    _config = None
