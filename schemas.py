"""
Database Schemas for the perfume catalog

Each Pydantic model below maps to a MongoDB collection (collection name is the lowercase of the class name).
Request/response models for the olfactory endpoints live at the bottom.
"""
from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

from olfactory import classify, family_labels, normalize_note, scent_summary


def _clean_notes(value) -> List[str]:
    """Normalize note ids and drop duplicates, keeping first-seen order."""
    if isinstance(value, str):
        value = [value]
    seen: List[str] = []
    for note in value or []:
        key = normalize_note(note)
        if key and key not in seen:
            seen.append(key)
    return seen


# ----------------------------
# Core Domain Schemas
# ----------------------------

class Fragrance(BaseModel):
    name: str = Field(..., min_length=1, description="Fragrance display name")
    brand: str = Field(..., min_length=1, description="Brand name")
    price: float = Field(..., gt=0, description="Price in EUR")
    description: Optional[str] = None
    volume: Optional[str] = Field(None, description="e.g. 50ml, 100ml")
    gender: Optional[str] = Field(None, description="male | female | unisex")
    season: Optional[List[str]] = Field(default=None, description="seasons e.g. spring, summer, fall, winter")
    occasion: Optional[List[str]] = Field(default=None, description="e.g. casual, office, date, evening")
    notes_top: List[str] = Field(default_factory=list, description="Top note ids")
    notes_heart: List[str] = Field(default_factory=list, description="Heart note ids")
    notes_base: List[str] = Field(default_factory=list, description="Base note ids")
    families: List[str] = Field(default_factory=list, description="Derived from the notes, never taken from input")
    category: Optional[str] = Field(None, description="Primary family")
    scent: Optional[str] = Field(None, description="Comma separated note labels")
    images: List[str] = Field(default_factory=list, description="Image URLs")
    thumbnail: Optional[str] = Field(None, description="Primary image URL")
    stock: int = Field(50, ge=0)
    featured: bool = Field(False)
    new_arrival: bool = Field(False)

    @field_validator("notes_top", "notes_heart", "notes_base", mode="before")
    @classmethod
    def normalize_notes(cls, v):
        return _clean_notes(v)

    def has_notes(self) -> bool:
        return bool(self.notes_top or self.notes_heart or self.notes_base)

    def with_families(self) -> "Fragrance":
        """Copy with families, category and scent recomputed from the notes."""
        families = family_labels(classify(self.notes_top, self.notes_heart, self.notes_base))
        return self.model_copy(update={
            "families": families,
            "category": families[0],
            "scent": scent_summary(self.notes_top, self.notes_heart, self.notes_base),
        })


class FragranceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    brand: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, gt=0)
    description: Optional[str] = None
    volume: Optional[str] = None
    gender: Optional[str] = None
    season: Optional[List[str]] = None
    occasion: Optional[List[str]] = None
    notes_top: Optional[List[str]] = None
    notes_heart: Optional[List[str]] = None
    notes_base: Optional[List[str]] = None
    images: Optional[List[str]] = None
    thumbnail: Optional[str] = None
    stock: Optional[int] = Field(None, ge=0)
    featured: Optional[bool] = None
    new_arrival: Optional[bool] = None

    @field_validator("notes_top", "notes_heart", "notes_base", mode="before")
    @classmethod
    def normalize_notes(cls, v):
        if v is None:
            return None
        return _clean_notes(v)


class QuizAnswer(BaseModel):
    gender: Optional[str] = None
    season: Optional[str] = None
    occasion: Optional[str] = None
    preferences: List[str] = Field(default_factory=list, description="preferred families e.g. Floral, Boisé")


# ----------------------------
# Olfactory API
# ----------------------------

class ClassifyRequest(BaseModel):
    notes_top: List[str] = Field(default_factory=list)
    notes_heart: List[str] = Field(default_factory=list)
    notes_base: List[str] = Field(default_factory=list)


class ClassifyResponse(BaseModel):
    families: List[str]
    category: str
    scent: str


class NoteEntry(BaseModel):
    key: str
    label: str
    families: List[str] = Field(default_factory=list)
