"""
Product-save workflow for the catalog.

The classifier is total and never complains; the rules an operator must
satisfy before a fragrance is saved are enforced here, at the call site.
"""
import logging
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from olfactory import Family, Tier, classify, family_labels, is_known_note, scent_summary
from schemas import Fragrance, FragranceUpdate

logger = logging.getLogger(__name__)

# Reject note ids outside their tier's vocabulary (default: accept custom notes)
STRICT_NOTES = os.getenv("STRICT_NOTES", "false").lower() == "true"

VALID_FAMILIES = {f.value for f in Family}

_TIER_FIELDS = (
    ("notes_top", Tier.TOP),
    ("notes_heart", Tier.HEART),
    ("notes_base", Tier.BASE),
)


class CatalogValidationError(ValueError):
    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))


def validate_fragrance(fragrance: Fragrance, strict: Optional[bool] = None) -> None:
    """
    Raises CatalogValidationError with a field -> message map.

    A fragrance needs at least one note in one of its tiers. In strict mode
    every note must also belong to its tier's vocabulary.
    """
    strict = STRICT_NOTES if strict is None else strict
    errors: Dict[str, str] = {}

    if not fragrance.has_notes():
        errors["notes"] = "Select at least one olfactory note"

    if strict:
        for field, tier in _TIER_FIELDS:
            unknown = [n for n in getattr(fragrance, field) if not is_known_note(n, tier)]
            if unknown:
                errors[field] = f"Unknown {tier.value} notes: {', '.join(unknown)}"

    if errors:
        logger.warning("Rejected fragrance %r: %s", fragrance.name, errors)
        raise CatalogValidationError(errors)


def prepare_fragrance(fragrance: Fragrance, strict: Optional[bool] = None) -> Fragrance:
    validate_fragrance(fragrance, strict=strict)
    return fragrance.with_families()


def apply_update(stored: Dict[str, Any], update: FragranceUpdate, strict: Optional[bool] = None) -> Fragrance:
    """Merge a partial update into a stored document; families are recomputed."""
    data = {k: v for k, v in stored.items() if k in Fragrance.model_fields}
    data.update(update.model_dump(exclude_unset=True))
    try:
        merged = Fragrance(**data)
    except ValidationError as exc:
        errors = {
            ".".join(str(part) for part in err["loc"]) or "fragrance": err["msg"]
            for err in exc.errors()
        }
        logger.warning("Rejected update of %r: %s", stored.get("name"), errors)
        raise CatalogValidationError(errors)
    return prepare_fragrance(merged, strict=strict)


def migrate_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Bring a stored document up to the current shape.

    Retired family labels (e.g. "Hespéridé", "Aromatique") are dropped; when
    none of the stored families survive they are reclassified from the notes.
    """
    if not doc:
        return doc
    for field, _ in _TIER_FIELDS:
        doc[field] = list(doc.get(field) or [])

    families = [f for f in doc.get("families") or [] if f in VALID_FAMILIES]
    if not families:
        families = family_labels(classify(doc["notes_top"], doc["notes_heart"], doc["notes_base"]))
    doc["families"] = families
    if not doc.get("category") or doc["category"] not in families:
        doc["category"] = families[0]
    if not doc.get("scent"):
        doc["scent"] = scent_summary(doc["notes_top"], doc["notes_heart"], doc["notes_base"])
    return doc
