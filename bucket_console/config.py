"""Configuration manager: YAML file merged over defaults, then environment overrides."""

import copy
import logging
import os

import yaml

logger = logging.getLogger(__name__)

# (environment variable, section, key, converter)
ENV_OVERRIDES = (
    ("AWS_REGION", "aws", "region", str),
    ("AWS_ACCESS_KEY_ID", "aws", "access_key_id", str),
    ("AWS_SECRET_ACCESS_KEY", "aws", "secret_access_key", str),
    ("S3_BUCKET_NAME", "storage", "bucket", str),
    ("SQS_QUEUE_URL", "queue", "url", str),
    ("SERVER_HOST", "server", "host", str),
    ("SERVER_PORT", "server", "port", int),
    ("LOG_LEVEL", "logging", "level", str),
)


class Config:
    """Configuration manager that loads from YAML and merges with defaults."""

    DEFAULTS = {
        "server": {
            "host": "0.0.0.0",
            "port": 5000,
            "debug": False,
        },
        "logging": {
            "level": "INFO",
        },
        "aws": {
            "region": "us-east-1",
            "access_key_id": "",
            "secret_access_key": "",
        },
        "storage": {
            "bucket": "",
            "prefix": "uploads/",
            "url_ttl_seconds": 3600,
        },
        "queue": {
            "url": "",
            "max_messages": 10,
            "wait_seconds": 1,
        },
        "logs": {
            "poll_interval_seconds": 30,
            "background_poll": False,
        },
    }

    def __init__(self, config_path=None, environ=None):
        self._config = copy.deepcopy(self.DEFAULTS)

        if config_path is not None:
            try:
                with open(config_path, "r") as f:
                    user_config = yaml.safe_load(f)

                if user_config and isinstance(user_config, dict):
                    self._config = self._deep_merge(self._config, user_config)
            except FileNotFoundError:
                logger.debug("No config file at %s, using defaults", config_path)
            except yaml.YAMLError:
                logger.warning("Invalid YAML in %s, using defaults", config_path)

        self._apply_env(os.environ if environ is None else environ)

    @staticmethod
    def _deep_merge(base, override):
        """Recursively merge override dict into base dict."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
        return result

    def _apply_env(self, environ):
        for var, section, key, convert in ENV_OVERRIDES:
            value = environ.get(var)
            if value:
                self._config.setdefault(section, {})[key] = convert(value)

    @classmethod
    def from_dict(cls, overrides: dict, environ=None) -> "Config":
        """Defaults merged with ``overrides``; no file is read."""
        config = cls(environ={})
        config._config = cls._deep_merge(config._config, overrides)
        config._apply_env(environ or {})
        return config

    def get(self, key, default=None):
        """Get a top-level config key."""
        return self._config.get(key, default)

    def __getitem__(self, key):
        return self._config[key]

    def __contains__(self, key):
        return key in self._config
