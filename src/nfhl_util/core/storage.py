"""
Inventory JSON files and download cache naming.
"""

import json
import logging
import shutil
from pathlib import Path, PurePosixPath
from urllib.parse import parse_qs, unquote, urlparse

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from nfhl_util.core.errors import StorageError
from nfhl_util.models.inventory import Inventory

logger = logging.getLogger(__name__)

_inventory_adapter: TypeAdapter[Inventory] = TypeAdapter(Inventory)


def save_inventory(path: Path, inventory: Inventory) -> None:
    """
    Write an inventory to a JSON file.

    The parent directory is created if needed. Keys are written in sorted
    order and the file is replaced atomically (write to temp, then move).

    Args:
        path: Destination JSON file
        inventory: Inventory to write

    Raises:
        StorageError: If the file cannot be written
    """
    payload = {
        key: inventory[key].model_dump(mode="json") for key in sorted(inventory)
    }

    temp_path = path.with_name(path.name + ".tmp")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        shutil.move(str(temp_path), str(path))
    except OSError as e:
        if temp_path.exists():
            temp_path.unlink()
        logger.error(f"Failed to write inventory {path}: {e}")
        raise StorageError(f"Failed to write inventory: {e}", path=str(path)) from e

    logger.info(f"Wrote {len(inventory)} inventory entries to {path}")


def load_inventory(path: Path) -> Inventory:
    """
    Read an inventory JSON file written by save_inventory.

    Raises:
        StorageError: If the file is missing, unreadable or malformed
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Cannot read inventory: {e}", path=str(path)) from e

    try:
        inventory = _inventory_adapter.validate_json(raw)
    except PydanticValidationError as e:
        raise StorageError(
            f"Malformed inventory file: {e.error_count()} validation errors",
            path=str(path),
            details={"errors": e.errors(include_url=False)[:5]},
        ) from e

    logger.debug(f"Loaded {len(inventory)} inventory entries from {path}")
    return inventory


def cache_filename(url: str) -> str:
    """
    Local file name for a FEMA download URL.

    Uses the ``fileName`` query parameter (NFHL portal links), else
    ``<productID>.zip`` (MSC links), else the last path segment.

    Raises:
        StorageError: If no usable name can be derived
    """
    parsed = urlparse(url)
    query = parse_qs(parsed.query)

    if query.get("fileName"):
        name = query["fileName"][0]
    elif query.get("productID"):
        name = query["productID"][0] + ".zip"
    else:
        name = unquote(PurePosixPath(parsed.path).name)

    # Never let a query value escape the cache directory
    name = PurePosixPath(name.replace("\\", "/")).name
    if not name or name in (".", ".."):
        raise StorageError(f"Cannot derive a cache file name from {url}")

    return name
