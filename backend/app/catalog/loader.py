"""
loader.py - Loads the versioned reference catalog from packaged YAML.

The catalog is a closed enumeration: entries change only with a release.
A malformed file stops the service at startup instead of serving partial data.
"""

from __future__ import annotations

import functools
import hashlib
import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from app.errors import CatalogError

from .models import (
    PROFILE_OCCURRENCE,
    PROFILES,
    Breach,
    Catalog,
    Penalty,
    TierBreach,
)

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
BREACHES_FILE = "breaches.yaml"
PENALTY_TIERS_FILE = "penalty_tiers.yaml"

BREACH_FIELDS = ("id", "code", "description", "base_amount", "regulation_reference")
PENALTY_FIELDS = ("id", "code", "description", "amount")


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")

    content = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(content, dict):
        raise CatalogError(f"Catalog file is not a valid YAML mapping: {path}")
    return content


def _to_amount(value: Any, where: str) -> Decimal:
    if isinstance(value, bool):
        raise CatalogError(f"{where}: amount must be a number, got {value!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise CatalogError(f"{where}: amount must be a number, got {value!r}") from e
    if not amount.is_finite() or amount < 0:
        raise CatalogError(f"{where}: amount must be non-negative, got {value!r}")
    return amount


def _entries(content: dict[str, Any], key: str, required: tuple[str, ...], source: str) -> list[dict[str, Any]]:
    entries = content.get(key)
    if not isinstance(entries, list) or not entries:
        raise CatalogError(f"{source}: '{key}' must be a non-empty list")

    seen_ids: set[int] = set()
    seen_codes: set[str] = set()
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise CatalogError(f"{source}: {key}[{index}] is not a mapping")
        missing = [name for name in required if name not in entry]
        if missing:
            raise CatalogError(f"{source}: {key}[{index}] is missing {', '.join(missing)}")
        if entry["id"] in seen_ids:
            raise CatalogError(f"{source}: duplicate id {entry['id']} in '{key}'")
        if entry["code"] in seen_codes:
            raise CatalogError(f"{source}: duplicate code {entry['code']} in '{key}'")
        seen_ids.add(entry["id"])
        seen_codes.add(entry["code"])
    return entries


def _parse_occurrences(content: dict[str, Any], source: str) -> tuple[int, ...]:
    occurrences = content.get("occurrences")
    if (
        not isinstance(occurrences, list)
        or not occurrences
        or any(isinstance(n, bool) or not isinstance(n, int) or n <= 0 for n in occurrences)
    ):
        raise CatalogError(f"{source}: 'occurrences' must be a non-empty list of positive integers")
    return tuple(occurrences)


def _canonical_hash(*contents: dict[str, Any]) -> str:
    # Sorted, compact JSON so the hash ignores YAML formatting and comments
    canonical = json.dumps(list(contents), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def load_catalog(profile: str = PROFILE_OCCURRENCE, data_dir: str | Path | None = None) -> Catalog:
    """
    Load and validate the catalog for a configuration profile.

    Args:
        profile: "occurrence" (breaches with base amounts + occurrence counts)
            or "tier" (breaches paired with fixed penalty tiers)
        data_dir: Directory holding the YAML files; the packaged data by default

    Returns:
        Frozen Catalog in declaration order

    Raises:
        CatalogError: Unknown profile, missing file, or malformed entry
    """
    if profile not in PROFILES:
        raise CatalogError(f"Unknown catalog profile: {profile!r}. Expected one of {PROFILES}")

    base = Path(data_dir) if data_dir else DATA_DIR
    breaches_path = base / BREACHES_FILE
    breaches_content = _read_yaml(breaches_path)
    raw_breaches = _entries(breaches_content, "breaches", BREACH_FIELDS, breaches_path.name)

    if profile == PROFILE_OCCURRENCE:
        breaches = tuple(
            Breach(
                id=int(entry["id"]),
                code=str(entry["code"]),
                description=str(entry["description"]),
                base_amount=_to_amount(entry["base_amount"], f"breach {entry['code']}"),
                regulation_reference=str(entry["regulation_reference"]),
            )
            for entry in raw_breaches
        )
        catalog = Catalog(
            profile=profile,
            version=str(breaches_content.get("version", "0.0.0")),
            catalog_hash=_canonical_hash(breaches_content),
            breaches=breaches,
            occurrences=_parse_occurrences(breaches_content, breaches_path.name),
        )
    else:
        tiers_path = base / PENALTY_TIERS_FILE
        tiers_content = _read_yaml(tiers_path)
        raw_penalties = _entries(tiers_content, "penalties", PENALTY_FIELDS, tiers_path.name)
        catalog = Catalog(
            profile=profile,
            version=str(tiers_content.get("version", "0.0.0")),
            catalog_hash=_canonical_hash(breaches_content, tiers_content),
            breaches=tuple(
                TierBreach(
                    id=int(entry["id"]),
                    code=str(entry["code"]),
                    description=str(entry["description"]),
                )
                for entry in raw_breaches
            ),
            penalties=tuple(
                Penalty(
                    id=int(entry["id"]),
                    code=str(entry["code"]),
                    description=str(entry["description"]),
                    amount=_to_amount(entry["amount"], f"penalty {entry['code']}"),
                )
                for entry in raw_penalties
            ),
        )

    logger.info(
        "Catalog loaded: profile=%s version=%s hash=%s breaches=%d penalties=%d",
        catalog.profile,
        catalog.version,
        catalog.catalog_hash[:12],
        len(catalog.breaches),
        len(catalog.penalties),
    )
    return catalog


@functools.lru_cache(maxsize=None)
def get_catalog(profile: str = PROFILE_OCCURRENCE, data_dir: str | None = None) -> Catalog:
    """Process-wide catalog, loaded once per (profile, data_dir)."""
    return load_catalog(profile, data_dir)
