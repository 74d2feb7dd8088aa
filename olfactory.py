"""
Olfactory dictionary and family classification.

Notes are grouped in three tiers of the olfactory pyramid (top, heart, base).
A fragrance's families are derived from its notes by fixed membership rules:
every family whose qualifying set intersects the fragrance's notes is kept.
Priority is nominally base > heart > top, but since every family is tested
against the merged set the tier a note comes from never changes the result.

Everything here is static reference data and pure functions; safe to call
from any request handler without coordination.
"""
from __future__ import annotations
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional


class Tier(str, Enum):
    TOP = "top"
    HEART = "heart"
    BASE = "base"


class Family(str, Enum):
    FLORAL = "Floral"
    WOODY = "Boisé"
    GOURMAND = "Gourmand"
    ORIENTAL = "Oriental"
    SPICY = "Épicé"
    LEATHER = "Cuiré"
    FRESH = "Frais/Aquatique"


DEFAULT_FAMILY = Family.FLORAL

# ----------------------------
# Note vocabularies
# ----------------------------

_TOP_NOTES = {
    "citron": "Citron",
    "bergamote": "Bergamote",
    "mandarine": "Mandarine",
    "pamplemousse": "Pamplemousse",
    "orange_sanguine": "Orange sanguine",
    "lime": "Lime (Citron vert)",
    "yuzu": "Yuzu",
    "verveine": "Verveine",
    "citronnelle": "Citronnelle",
    "baies_genievre": "Baies de genièvre",
    "poivre_rose": "Poivre rose",
    "menthe_poivree": "Menthe poivrée",
    "lavande": "Lavande",
    "neroli": "Néroli",
    "pomme_verte": "Pomme verte",
    "noix_coco": "Noix de coco",
    "peche": "Pêche",
    "framboise": "Framboise",
    "melon": "Melon",
    "cassis": "Cassis",
    "aldehydes": "Aldéhydes",
    "accord_marin": "Accord marin",
    "calone": "Calone",
    "rhubarbe": "Rhubarbe",
}

_HEART_NOTES = {
    "rose_mai": "Rose de Mai",
    "rose_damascena": "Rose Damascena",
    "jasmin_sambac": "Jasmin Sambac",
    "jasmin_espagne": "Jasmin d'Espagne",
    "iris_toscane": "Iris de Toscane",
    "tuberose": "Tubéreuse",
    "fleur_oranger": "Fleur d'oranger",
    "ylang_ylang": "Ylang-Ylang",
    "geranium": "Géranium",
    "magnolia": "Magnolia",
    "pivoine": "Pivoine",
    "gardenia": "Gardénia",
    "freesia": "Freesia",
    "violette": "Violette",
    "cannelle": "Cannelle",
    "muscade": "Muscade",
    "cardamome": "Cardamome",
    "clou_girofle": "Clou de girofle",
    "safran": "Safran",
    "gingembre": "Gingembre",
    "sauge_sclaree": "Sauge sclarée",
    "romarin": "Romarin",
    "thym": "Thym",
    "the_vert": "Thé Vert",
    "cyclamen": "Cyclamen",
}

_BASE_NOTES = {
    "bois_santal": "Bois de Santal",
    "cedre_atlas": "Cèdre de l'Atlas",
    "cedre_virginie": "Cèdre de Virginie",
    "patchouli": "Patchouli",
    "vetiver_haiti": "Vétiver de Haïti",
    "oud": "Oud (Bois d'Agar)",
    "musc_blanc": "Musc blanc",
    "ambre_gris": "Ambre gris",
    "ambre_jaune": "Ambre jaune",
    "vanille_bourbon": "Vanille Bourbon",
    "gousse_vanille": "Gousse de Vanille",
    "feve_tonka": "Fève Tonka",
    "benjoin": "Benjoin",
    "mousse_chene": "Mousse de chêne",
    "cuir": "Cuir",
    "daim": "Daim (Suede)",
    "tabac_blond": "Tabac blond",
    "encens": "Encens",
    "myrrhe": "Myrrhe",
    "caramel": "Caramel",
    "chocolat_noir": "Chocolat noir",
    "cafe": "Café",
    "praline": "Praliné",
    "miel": "Miel",
    "ciste_labdanum": "Ciste Labdanum",
    "castorium_synthetique": "Castoréum (synthétique)",
    "civette_synthetique": "Civette (synthétique)",
}

OLFACTORY_DICTIONARY: Mapping[Tier, Mapping[str, str]] = MappingProxyType({
    Tier.TOP: MappingProxyType(_TOP_NOTES),
    Tier.HEART: MappingProxyType(_HEART_NOTES),
    Tier.BASE: MappingProxyType(_BASE_NOTES),
})

PYRAMID_LABELS: Mapping[Tier, str] = MappingProxyType({
    Tier.TOP: "Notes de Tête",
    Tier.HEART: "Notes de Cœur",
    Tier.BASE: "Notes de Fond",
})

PYRAMID_DESCRIPTIONS: Mapping[Tier, str] = MappingProxyType({
    Tier.TOP: "Première impression, volatilité élevée (5-30 min)",
    Tier.HEART: "Signature du parfum, volatilité moyenne (2-4h)",
    Tier.BASE: "Sillage et profondeur, volatilité basse (4-24h)",
})

# ----------------------------
# Family membership rules
# ----------------------------

# Insertion order is the order families are reported in.
FAMILY_RULES: Mapping[Family, FrozenSet[str]] = MappingProxyType({
    Family.FLORAL: frozenset({
        "rose_mai", "rose_damascena", "jasmin_sambac", "jasmin_espagne",
        "iris_toscane", "tuberose", "fleur_oranger", "ylang_ylang",
        "geranium", "magnolia", "pivoine", "gardenia", "freesia",
        "violette", "cyclamen", "neroli",
    }),
    Family.WOODY: frozenset({
        "bois_santal", "cedre_atlas", "cedre_virginie", "patchouli",
        "vetiver_haiti", "oud", "mousse_chene",
    }),
    Family.GOURMAND: frozenset({
        "vanille_bourbon", "gousse_vanille", "feve_tonka", "caramel",
        "chocolat_noir", "cafe", "praline", "miel", "noix_coco",
    }),
    Family.ORIENTAL: frozenset({
        "ambre_gris", "ambre_jaune", "encens", "myrrhe", "benjoin",
        "musc_blanc", "ciste_labdanum", "oud",
    }),
    Family.SPICY: frozenset({
        "poivre_rose", "cannelle", "cardamome", "safran", "clou_girofle",
        "muscade", "gingembre",
    }),
    Family.LEATHER: frozenset({
        "cuir", "daim", "tabac_blond", "castorium_synthetique",
        "civette_synthetique",
    }),
    Family.FRESH: frozenset({
        "accord_marin", "calone", "menthe_poivree", "aldehydes",
        "pomme_verte", "citron", "bergamote", "mandarine", "pamplemousse",
        "lime", "yuzu", "verveine", "citronnelle", "lavande", "rhubarbe",
    }),
})

# lower-cased display label -> note id, all tiers
_LABEL_INDEX: Dict[str, str] = {
    label.lower(): note_id
    for vocabulary in OLFACTORY_DICTIONARY.values()
    for note_id, label in vocabulary.items()
}


# ----------------------------
# Lookups
# ----------------------------

def normalize_note(value: str) -> str:
    """Canonical note id for a key or a display label ("Bois de Santal" -> "bois_santal")."""
    key = str(value).strip().lower()
    return _LABEL_INDEX.get(key, key)


def note_ids(tier: Tier) -> List[str]:
    return list(OLFACTORY_DICTIONARY[Tier(tier)].keys())


def all_notes() -> Dict[Tier, List[Dict[str, str]]]:
    return {
        tier: [{"key": key, "label": label} for key, label in vocabulary.items()]
        for tier, vocabulary in OLFACTORY_DICTIONARY.items()
    }


def humanize_note_id(note_id: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in note_id.split("_"))


def note_label(note_id: str, tier: Optional[Tier] = None) -> str:
    """
    Display label of a note. Looks in the given tier's vocabulary (or in
    every tier when none is given); unknown ids are rendered by title-casing
    the slug, e.g. "special_blend_42" -> "Special Blend 42".
    """
    raw = str(note_id).strip()
    key = normalize_note(raw)
    tiers = [Tier(tier)] if tier is not None else list(OLFACTORY_DICTIONARY)
    for t in tiers:
        label = OLFACTORY_DICTIONARY[t].get(key)
        if label is not None:
            return label
    return humanize_note_id(raw)


def is_known_note(note_id: str, tier: Tier) -> bool:
    return normalize_note(note_id) in OLFACTORY_DICTIONARY[Tier(tier)]


def families_for_note(note_id: str) -> List[Family]:
    key = normalize_note(note_id)
    return [family for family, members in FAMILY_RULES.items() if key in members]


# ----------------------------
# Classification
# ----------------------------

def _merge(*tiers: Optional[Iterable[str]]) -> FrozenSet[str]:
    merged = set()
    for notes in tiers:
        for note in notes or ():
            merged.add(normalize_note(note))
    return frozenset(merged)


def classify(
    top: Optional[Iterable[str]] = None,
    heart: Optional[Iterable[str]] = None,
    base: Optional[Iterable[str]] = None,
) -> List[Family]:
    """
    Olfactory families of a fragrance, in rule order, never empty.

    Families are evaluated independently, so a composition may belong to
    several at once (rose + oud is Floral, Woody and Oriental). Unknown
    notes match nothing; when nothing matches the result is [Family.FLORAL].
    """
    notes = _merge(base, heart, top)
    families = [family for family, members in FAMILY_RULES.items() if not members.isdisjoint(notes)]
    return families or [DEFAULT_FAMILY]


def family_labels(families: Iterable[Family]) -> List[str]:
    return [Family(f).value for f in families]


def scent_summary(
    top: Optional[Iterable[str]] = None,
    heart: Optional[Iterable[str]] = None,
    base: Optional[Iterable[str]] = None,
) -> str:
    labels = []
    for tier, notes in ((Tier.TOP, top), (Tier.HEART, heart), (Tier.BASE, base)):
        labels.extend(note_label(n, tier) for n in notes or ())
    return ", ".join(labels)
