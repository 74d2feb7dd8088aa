import pytest

from olfactory import (
    DEFAULT_FAMILY,
    FAMILY_RULES,
    OLFACTORY_DICTIONARY,
    Family,
    Tier,
    all_notes,
    classify,
    family_labels,
    families_for_note,
    normalize_note,
    note_ids,
    note_label,
    scent_summary,
)


def labels(top=None, heart=None, base=None):
    return family_labels(classify(top, heart, base))


def test_empty_notes_fall_back_to_floral():
    assert classify(set(), set(), set()) == [Family.FLORAL]
    assert classify() == [DEFAULT_FAMILY]


def test_unknown_notes_fall_back_to_floral():
    assert labels({"special_blend_42"}, {"nothing"}, {"bois_imaginaire"}) == ["Floral"]


def test_woody_base():
    assert labels(set(), set(), {"bois_santal", "patchouli"}) == ["Boisé"]


def test_spicy_and_oriental():
    result = labels({"poivre_rose"}, {"cannelle"}, {"ambre_gris"})
    assert set(result) == {"Épicé", "Oriental"}
    assert result == ["Oriental", "Épicé"]


def test_rose_and_oud_is_floral_and_oriental():
    result = labels(heart={"rose_mai"}, base={"oud"})
    assert "Floral" in result
    assert "Oriental" in result


def test_results_follow_rule_order_without_duplicates():
    result = labels(
        {"citron", "bergamote"},
        {"rose_mai", "jasmin_sambac", "safran"},
        {"cuir", "vanille_bourbon", "oud", "bois_santal"},
    )
    assert result == ["Floral", "Boisé", "Gourmand", "Oriental", "Épicé", "Cuiré", "Frais/Aquatique"]
    assert len(result) == len(set(result))


def test_order_independent():
    a = classify(["miel", "cuir", "encens"], ["violette"], ["calone"])
    b = classify(["encens", "cuir", "miel"], ["violette"], ["calone"])
    c = classify(("calone",), ("violette",), ("miel", "encens", "cuir"))
    assert a == b == c


def test_idempotent():
    notes = ({"yuzu"}, {"safran"}, {"daim"})
    assert classify(*notes) == classify(*notes)


def test_tier_of_a_note_does_not_matter():
    assert classify({"oud"}, set(), set()) == classify(set(), set(), {"oud"})


def test_only_known_family_labels():
    valid = {f.value for f in Family}
    for tier in Tier:
        for note in note_ids(tier):
            assert set(labels(base=[note])) <= valid


def test_labels_and_case_are_accepted():
    assert labels(base=["Bois de Santal"]) == ["Boisé"]
    assert labels(top=["  CALONE "]) == ["Frais/Aquatique"]


def test_every_rule_member_is_a_known_note():
    known = {key for vocabulary in OLFACTORY_DICTIONARY.values() for key in vocabulary}
    for members in FAMILY_RULES.values():
        assert members <= known


def test_vocabularies_are_read_only():
    with pytest.raises(TypeError):
        OLFACTORY_DICTIONARY[Tier.TOP]["citron"] = "Lemon"


def test_note_ids_per_tier():
    assert note_ids(Tier.TOP)[0] == "citron"
    assert "rose_mai" in note_ids(Tier.HEART)
    assert "rose_mai" not in note_ids(Tier.BASE)
    assert len(note_ids(Tier.BASE)) == 27


def test_all_notes_shape():
    notes = all_notes()
    assert set(notes) == set(Tier)
    assert {"key": "oud", "label": "Oud (Bois d'Agar)"} in notes[Tier.BASE]


@pytest.mark.parametrize("note_id,tier,expected", [
    ("rose_mai", Tier.HEART, "Rose de Mai"),
    ("cedre_atlas", Tier.BASE, "Cèdre de l'Atlas"),
    ("special_blend_42", Tier.TOP, "Special Blend 42"),
    ("rose_mai", Tier.TOP, "Rose Mai"),
    ("cuir", None, "Cuir"),
])
def test_note_label(note_id, tier, expected):
    assert note_label(note_id, tier) == expected


def test_normalize_note():
    assert normalize_note("Ambre gris") == "ambre_gris"
    assert normalize_note("Custom_Note") == "custom_note"


def test_families_for_note():
    assert families_for_note("oud") == [Family.WOODY, Family.ORIENTAL]
    assert families_for_note("melon") == []


def test_scent_summary():
    assert scent_summary(["bergamote"], ["rose_mai"], ["my_accord"]) == "Bergamote, Rose de Mai, My Accord"
    assert scent_summary() == ""
