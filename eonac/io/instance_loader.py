"""Load problem instances from YAML or JSON files."""

import json
from pathlib import Path
from typing import Any

import yaml

from eonac.configs.errors import ConfigFileNotFoundError, ConfigParseError
from eonac.domain.catalog import RequestCatalog
from eonac.utils.logging_config import get_logger

logger = get_logger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1] / "data"

REFERENCE_FILES = {
    "b140": "reference_b140.yaml",
    "b360": "reference_b360.yaml",
}


def load_instance_data(path: str | Path) -> dict[str, Any]:
    """Read the raw instance mapping from ``path``.

    :param path: ``.yaml``, ``.yml`` or ``.json`` file
    :type path: str | Path
    :return: Parsed mapping
    :rtype: dict[str, Any]
    :raises ConfigFileNotFoundError: If the file does not exist
    :raises ConfigParseError: If the file cannot be parsed or has the wrong shape
    """
    instance_fp = Path(path)
    if not instance_fp.exists():
        raise ConfigFileNotFoundError(f"Instance file not found: {instance_fp}")

    try:
        with instance_fp.open("r", encoding="utf-8") as file_obj:
            if instance_fp.suffix == ".json":
                data = json.load(file_obj)
            elif instance_fp.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(file_obj)
            else:
                raise ConfigParseError(
                    f"Unsupported instance file format: {instance_fp.suffix}"
                )
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(f"Failed to parse {instance_fp}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigParseError(
            f"Instance file {instance_fp} must contain a mapping at the top level"
        )
    return data


def load_catalog(
    path: str | Path, unknown_link_policy: str | None = None
) -> RequestCatalog:
    """Load and validate a request catalog from a file.

    :param path: Instance file
    :type path: str | Path
    :param unknown_link_policy: Overrides the policy stored in the file
    :type unknown_link_policy: str | None
    :return: Validated catalog
    :rtype: RequestCatalog
    """
    data = load_instance_data(path)
    catalog = RequestCatalog.from_dict(data, unknown_link_policy=unknown_link_policy)
    logger.debug(
        "Loaded %d requests, %d zones, B=%d from %s",
        len(catalog),
        len(catalog.zones),
        catalog.slot_ceiling,
        path,
    )
    return catalog


def load_reference_catalog(
    name: str, unknown_link_policy: str | None = None
) -> RequestCatalog:
    """Load one of the bundled reference instances (``b140`` or ``b360``).

    :raises KeyError: If ``name`` is not a bundled instance
    """
    if name not in REFERENCE_FILES:
        raise KeyError(
            f"Unknown reference instance '{name}'. "
            f"Available: {sorted(REFERENCE_FILES)}"
        )
    return load_catalog(DATA_DIR / REFERENCE_FILES[name], unknown_link_policy)


def save_catalog(catalog: RequestCatalog, path: str | Path) -> None:
    """Write ``catalog`` in the layout :func:`load_catalog` reads."""
    instance_fp = Path(path)
    instance_fp.parent.mkdir(parents=True, exist_ok=True)
    data = catalog.to_dict()
    with instance_fp.open("w", encoding="utf-8") as file_obj:
        if instance_fp.suffix == ".json":
            json.dump(data, file_obj, indent=2)
        else:
            yaml.safe_dump(data, file_obj, default_flow_style=None, sort_keys=False)
