"""Host identification tag read from a machine settings file."""

import json
from collections.abc import Iterable
from pathlib import Path

from eventgate.logging import get_logger

log = get_logger(__name__)

# Used when the settings file cannot supply a host id
UNDEFINED_SETTING = "UNDEFINED"


def _render(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def host_id_from_settings(path: str | Path, keys: Iterable[str]) -> str:
    """Build a host id by joining settings values with underscores.

    A key that is missing or null contributes an empty segment. Scalars are
    rendered with str(), so JSON true becomes "True".

    Args:
        path: JSON settings file holding an object at the top level
        keys: Top-level keys whose values form the host id, in order

    Returns:
        The host id, or UNDEFINED_SETTING if no keys are given or the file
        cannot be read as a JSON object
    """
    keys = list(keys)
    if not keys:
        return UNDEFINED_SETTING

    try:
        with open(path) as f:
            settings = json.load(f)
    except (OSError, ValueError) as e:
        log.warning("Could not read host id from settings", path=str(path), error=str(e))
        return UNDEFINED_SETTING

    if not isinstance(settings, dict):
        log.warning("Host settings file is not a JSON object", path=str(path))
        return UNDEFINED_SETTING

    return "_".join(_render(settings.get(key)) for key in keys)


def host_tags(path: str | Path, keys: Iterable[str]) -> dict[str, str]:
    return {"host_id": host_id_from_settings(path, keys)}
