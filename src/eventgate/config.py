"""Configuration loading for eventgate."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from eventgate.emitter.host_id import host_tags
from eventgate.emitter.router import EventRouter, configure

_TRUE_VALUES = {"1", "true", "yes", "on"}


def parse_bool(value: object) -> bool:
    """Interpret a YAML or env value such as true, "yes" or "0" as a flag."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _mapping(value: object, name: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be a mapping")
    return value


def parse_tags(raw: str) -> dict[str, str]:
    """Parse 'env=prod,region=eu' into a tag mapping."""
    tags: dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid tag {item!r}, expected key=value")
        tags[key.strip()] = value.strip()
    return tags


@dataclass
class HostSettingsConfig:
    """Where to read the host id tag from."""

    path: Path | None = None
    keys: list[str] = field(default_factory=list)


@dataclass
class Config:
    """Emitter configuration."""

    dsn: str | None = None
    threshold: str = "Error"
    strict: bool = False
    tags: dict[str, str] = field(default_factory=dict)
    host_settings: HostSettingsConfig = field(default_factory=HostSettingsConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        settings_path = os.environ.get("EVENTGATE_SETTINGS_PATH")
        settings_keys = os.environ.get("EVENTGATE_SETTINGS_KEYS", "")

        return cls(
            dsn=os.environ.get("EVENTGATE_DSN") or None,
            threshold=os.environ.get("EVENTGATE_THRESHOLD", "Error"),
            strict=parse_bool(os.environ.get("EVENTGATE_STRICT", "")),
            tags=parse_tags(os.environ.get("EVENTGATE_TAGS", "")),
            host_settings=HostSettingsConfig(
                path=Path(settings_path) if settings_path else None,
                keys=[k.strip() for k in settings_keys.split(",") if k.strip()],
            ),
        )

    @classmethod
    def from_file(cls, path: Path) -> "Config":
        """Load configuration from YAML file, with env var overrides.

        Raises:
            ValueError: If the file or one of its sections is not a mapping
            yaml.YAMLError: If the file is not valid YAML
        """
        config = cls.from_env()

        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f)

            if data is not None and not isinstance(data, dict):
                raise ValueError(f"{path} must contain a mapping")

            if data:
                if not config.dsn:
                    config.dsn = data.get("dsn") or None
                if "EVENTGATE_THRESHOLD" not in os.environ and "threshold" in data:
                    config.threshold = str(data["threshold"])
                if "EVENTGATE_STRICT" not in os.environ and "strict" in data:
                    config.strict = parse_bool(data["strict"])

                # Env tags win over file tags with the same key
                file_tags = _mapping(data.get("tags"), "tags")
                config.tags = {**{str(k): str(v) for k, v in file_tags.items()}, **config.tags}

                hs = _mapping(data.get("host_settings"), "host_settings")
                if hs:
                    # Env path and keys each win over the file's when set
                    settings = config.host_settings
                    if settings.path is None and hs.get("path"):
                        settings.path = Path(hs["path"])
                    if not settings.keys:
                        keys = hs.get("keys") or []
                        if isinstance(keys, str):
                            keys = [keys]
                        settings.keys = [str(k) for k in keys]

        return config

    def static_tags(self) -> dict[str, str]:
        """Tags attached to every event, including the host id when configured."""
        tags = dict(self.tags)
        if self.host_settings.path is not None:
            tags.update(host_tags(self.host_settings.path, self.host_settings.keys))
        return tags

    @property
    def redacted_dsn(self) -> str | None:
        """DSN with the secret key masked, safe to print."""
        if not self.dsn or "@" not in self.dsn:
            return self.dsn
        credentials, _, rest = self.dsn.partition("@")
        scheme, sep, keys = credentials.rpartition("//")
        public_key, colon, _secret = keys.partition(":")
        masked = f"{public_key}:***" if colon else public_key
        return f"{scheme}{sep}{masked}@{rest}"


def configure_from_config(config: Config) -> EventRouter:
    """Install the process-wide router from a loaded Config."""
    return configure(
        config.dsn,
        config.threshold,
        config.static_tags(),
        strict=config.strict,
    )
