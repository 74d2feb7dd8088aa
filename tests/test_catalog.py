import pytest

from catalog import CatalogValidationError, apply_update, migrate_document, prepare_fragrance, validate_fragrance
from schemas import Fragrance, FragranceUpdate


@pytest.fixture
def fragrance():
    return Fragrance(
        name="Ambre Nuit",
        brand="Maison Test",
        price=120,
        notes_top=["poivre_rose"],
        notes_heart=["cannelle"],
        notes_base=["ambre_gris"],
        families=["Hespéridé"],
    )


def test_notes_are_normalized_and_deduplicated():
    f = Fragrance(name="x", brand="y", price=1, notes_base=["Oud", "oud", "Bois de Santal"])
    assert f.notes_base == ["oud", "bois_santal"]


def test_prepare_recomputes_families(fragrance):
    prepared = prepare_fragrance(fragrance)
    assert prepared.families == ["Oriental", "Épicé"]
    assert prepared.category == "Oriental"
    assert prepared.scent == "Poivre rose, Cannelle, Ambre gris"


def test_at_least_one_note_required():
    f = Fragrance(name="Vide", brand="y", price=10)
    with pytest.raises(CatalogValidationError) as exc:
        validate_fragrance(f)
    assert "notes" in exc.value.errors


def test_strict_mode_rejects_notes_outside_their_tier(fragrance):
    f = fragrance.model_copy(update={"notes_top": ["oud", "special_blend_42"]})
    validate_fragrance(f, strict=False)
    with pytest.raises(CatalogValidationError) as exc:
        validate_fragrance(f, strict=True)
    assert "oud" in exc.value.errors["notes_top"]
    assert "notes_base" not in exc.value.errors


def test_apply_update_reclassifies(fragrance):
    stored = prepare_fragrance(fragrance).model_dump()
    stored["_id"] = "abc"
    updated = apply_update(stored, FragranceUpdate(notes_base=["bois_santal", "patchouli"], notes_top=[], notes_heart=[]))
    assert updated.families == ["Boisé"]
    assert updated.name == "Ambre Nuit"


def test_apply_update_keeps_notes_when_not_sent(fragrance):
    stored = prepare_fragrance(fragrance).model_dump()
    updated = apply_update(stored, FragranceUpdate(price=99))
    assert updated.price == 99
    assert updated.families == ["Oriental", "Épicé"]


def test_apply_update_cannot_clear_every_note(fragrance):
    stored = prepare_fragrance(fragrance).model_dump()
    with pytest.raises(CatalogValidationError):
        apply_update(stored, FragranceUpdate(notes_top=[], notes_heart=[], notes_base=[]))


def test_migrate_drops_retired_families():
    doc = {"name": "Old", "families": ["Hespéridé", "Aromatique"], "notes_base": ["cuir"]}
    migrated = migrate_document(doc)
    assert migrated["families"] == ["Cuiré"]
    assert migrated["category"] == "Cuiré"
    assert migrated["notes_top"] == []


def test_migrate_keeps_valid_families():
    doc = {"families": ["Boisé", "Aromatique"], "notes_top": [], "notes_heart": [], "notes_base": []}
    assert migrate_document(doc)["families"] == ["Boisé"]


def test_migrate_legacy_without_notes_defaults_to_floral():
    assert migrate_document({"name": "Legacy"})["families"] == ["Floral"]


def test_apply_update_null_required_field_is_a_validation_error(fragrance):
    stored = prepare_fragrance(fragrance).model_dump()
    with pytest.raises(CatalogValidationError) as exc:
        apply_update(stored, FragranceUpdate(name=None))
    assert "name" in exc.value.errors


def test_apply_update_on_document_missing_price(fragrance):
    stored = prepare_fragrance(fragrance).model_dump()
    del stored["price"]
    with pytest.raises(CatalogValidationError) as exc:
        apply_update(stored, FragranceUpdate(stock=3))
    assert "price" in exc.value.errors
