"""Hashing utilities for cache keys and material fingerprints."""

import hashlib
import json

from daily_digest.data_model.models import Material


def sha256_hex(value: str) -> str:
    """Return the hex SHA-256 digest of a UTF-8 string."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def compute_materials_fingerprint(materials: list[Material]) -> str:
    """Compute a deterministic fingerprint of an ordered material list.

    The fingerprint covers each material's ref id, link, title, source, raw
    publish date and a hash of its text, serialized as compact JSON in list
    order. Any change to those fields, or to the order, changes the result.

    Args:
        materials: Final materials of a run.

    Returns:
        Hex SHA-256 digest.

    Examples:
        >>> compute_materials_fingerprint([]) == sha256_hex("[]")
        True
    """
    payload = [
        {
            "id": material.ref_id,
            "link": material.link,
            "title": material.title,
            "source": material.source,
            "pubDate": material.publish_date or "",
            "text_sha256": sha256_hex(material.text),
        }
        for material in materials
    ]
    return sha256_hex(json.dumps(payload, ensure_ascii=False, separators=(",", ":")))
