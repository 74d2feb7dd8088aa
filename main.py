import logging
import os
import re
from typing import List, Optional, Dict, Any
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from bson import ObjectId

from catalog import CatalogValidationError, apply_update, migrate_document, prepare_fragrance
from database import db, create_document, get_documents, update_document, delete_document
from olfactory import (
    Family,
    Tier,
    PYRAMID_DESCRIPTIONS,
    PYRAMID_LABELS,
    OLFACTORY_DICTIONARY,
    classify,
    family_labels,
    families_for_note,
    normalize_note,
    note_label,
    scent_summary,
)
from schemas import Fragrance, FragranceUpdate, QuizAnswer, ClassifyRequest, ClassifyResponse, NoteEntry

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Parfumerie Catalog API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------
# Helpers
# -------------------------

def oid(id_str: str) -> ObjectId:
    try:
        return ObjectId(id_str)
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid id")


def serialize(doc: Dict[str, Any]) -> Dict[str, Any]:
    if not doc:
        return doc
    doc["id"] = str(doc.pop("_id"))
    return doc


def storage():
    if db is None:
        raise HTTPException(status_code=503, detail="Database not available")
    return db


def find_fragrance(fid: str) -> Dict[str, Any]:
    doc = storage()["fragrance"].find_one({"_id": oid(fid)})
    if not doc:
        raise HTTPException(404, "Fragrance not found")
    return migrate_document(doc)


@app.exception_handler(CatalogValidationError)
async def catalog_validation_handler(request: Request, exc: CatalogValidationError):
    return JSONResponse(status_code=422, content={"detail": exc.errors})


# -------------------------
# Health
# -------------------------
@app.get("/")
def read_root():
    return {"message": "Parfumerie Catalog Backend Ready"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set",
        "database_name": "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set",
        "connection_status": "Not Connected",
        "collections": []
    }

    if db is None:
        return response

    response["connection_status"] = "Connected"
    try:
        response["collections"] = db.list_collection_names()[:10]
        response["database"] = "✅ Connected & Working"
    except Exception as e:
        logger.exception("Database check failed")
        response["database"] = f"⚠️  Connected but Error: {str(e)[:50]}"
    return response


# -------------------------
# Olfactory reference data
# -------------------------

@app.get("/api/olfactory/families", response_model=List[str])
def list_families():
    return [f.value for f in Family]


@app.get("/api/olfactory/notes", response_model=Dict[str, dict])
def list_all_notes():
    return {tier.value: notes_for_tier(tier) for tier in Tier}


@app.get("/api/olfactory/notes/{tier}", response_model=dict)
def notes_for_tier(tier: Tier):
    return {
        "tier": tier.value,
        "label": PYRAMID_LABELS[tier],
        "description": PYRAMID_DESCRIPTIONS[tier],
        "notes": [
            NoteEntry(key=key, label=label, families=family_labels(families_for_note(key))).model_dump()
            for key, label in OLFACTORY_DICTIONARY[tier].items()
        ],
    }


@app.get("/api/olfactory/notes/{tier}/{note_id}/label", response_model=NoteEntry)
def resolve_note_label(tier: Tier, note_id: str):
    return NoteEntry(
        key=normalize_note(note_id),
        label=note_label(note_id, tier),
        families=family_labels(families_for_note(note_id)),
    )


@app.post("/api/olfactory/classify", response_model=ClassifyResponse)
def classify_notes(req: ClassifyRequest):
    families = family_labels(classify(req.notes_top, req.notes_heart, req.notes_base))
    return ClassifyResponse(
        families=families,
        category=families[0],
        scent=scent_summary(req.notes_top, req.notes_heart, req.notes_base),
    )


# -------------------------
# Catalog Endpoints
# -------------------------

@app.post("/api/fragrances", response_model=dict)
def create_fragrance(fragrance: Fragrance):
    storage()
    prepared = prepare_fragrance(fragrance)
    fid = create_document("fragrance", prepared)
    logger.info("Created fragrance %s (%s) families=%s", fid, prepared.name, prepared.families)
    return {"id": fid, "families": prepared.families}


@app.get("/api/fragrances", response_model=List[dict])
def list_fragrances(
    q: Optional[str] = None,
    family: Optional[str] = Query(None, description="Floral|Boisé|Gourmand|Oriental|Épicé|Cuiré|Frais/Aquatique"),
    occasion: Optional[str] = None,
    season: Optional[str] = None,
    gender: Optional[str] = None,
    featured: Optional[bool] = None,
    new_arrival: Optional[bool] = None,
    limit: int = 24
):
    storage()
    filt: Dict[str, Any] = {}
    if q:
        filt["name"] = {"$regex": re.escape(q), "$options": "i"}
    if family:
        filt["families"] = family
    if occasion:
        filt["occasion"] = occasion
    if season:
        filt["season"] = season
    if gender:
        filt["gender"] = gender
    if featured is not None:
        filt["featured"] = featured
    if new_arrival is not None:
        filt["new_arrival"] = new_arrival

    docs = get_documents("fragrance", filt, limit)
    return [serialize(migrate_document(d)) for d in docs]


@app.get("/api/fragrances/{fid}", response_model=dict)
def get_fragrance(fid: str):
    return serialize(find_fragrance(fid))


@app.put("/api/fragrances/{fid}", response_model=dict)
def update_fragrance(fid: str, update: FragranceUpdate):
    doc = find_fragrance(fid)
    prepared = apply_update(doc, update)
    update_document("fragrance", doc["_id"], prepared)
    logger.info("Updated fragrance %s families=%s", fid, prepared.families)
    return {"id": fid, **prepared.model_dump()}


@app.delete("/api/fragrances/{fid}", response_model=dict)
def remove_fragrance(fid: str):
    storage()
    if not delete_document("fragrance", oid(fid)):
        raise HTTPException(404, "Fragrance not found")
    logger.info("Deleted fragrance %s", fid)
    return {"deleted": fid}


@app.get("/api/fragrances/{fid}/similar", response_model=List[dict])
def similar_fragrances(fid: str, limit: int = 8):
    doc = find_fragrance(fid)
    query = {"families": {"$in": doc["families"]}, "_id": {"$ne": doc["_id"]}}
    sims = storage()["fragrance"].find(query).limit(limit)
    return [serialize(migrate_document(d)) for d in sims]


# -------------------------
# Quiz & Recommendations
# -------------------------

@app.post("/api/quiz/recommendations", response_model=List[dict])
def quiz_recommendations(answers: QuizAnswer):
    storage()
    filt: Dict[str, Any] = {}
    if answers.gender:
        filt["gender"] = answers.gender
    if answers.season:
        filt["season"] = answers.season
    if answers.occasion:
        filt["occasion"] = answers.occasion
    if answers.preferences:
        filt["families"] = {"$in": answers.preferences}
    docs = get_documents("fragrance", filt, 12)
    return [serialize(migrate_document(d)) for d in docs]


# -------------------------
# Search with autocomplete
# -------------------------

@app.get("/api/search", response_model=List[dict])
def search(q: str, limit: int = 8):
    docs = storage()["fragrance"].find({"name": {"$regex": re.escape(q), "$options": "i"}}).limit(limit)
    return [serialize(migrate_document(d)) for d in docs]


# -------------------------
# Seed minimal sample data if empty (to demo UI)
# -------------------------
SAMPLES = [
    Fragrance(
        name="Noir Élite",
        brand="Maison Éclat",
        price=289,
        gender="unisex",
        season=["fall", "winter"],
        occasion=["evening", "date"],
        notes_top=["bergamote", "poivre_rose"],
        notes_heart=["rose_damascena", "safran"],
        notes_base=["oud", "bois_santal", "ambre_gris"],
        thumbnail="https://images.unsplash.com/photo-1556228578-8ea1fc0f8b2e?w=800&auto=format&fit=crop",
        featured=True,
        new_arrival=True,
    ),
    Fragrance(
        name="Lumière Blanche",
        brand="Atelier de Paris",
        price=210,
        gender="female",
        season=["spring", "summer"],
        occasion=["daytime", "office"],
        notes_top=["mandarine", "peche"],
        notes_heart=["jasmin_sambac", "fleur_oranger"],
        notes_base=["musc_blanc", "cedre_atlas"],
        thumbnail="https://images.unsplash.com/photo-1585386959984-a41552231605?w=800&auto=format&fit=crop",
        featured=True,
    ),
    Fragrance(
        name="Verde Sera",
        brand="Casa Botanica",
        price=185,
        gender="male",
        season=["summer"],
        occasion=["casual"],
        notes_top=["lime", "menthe_poivree"],
        notes_heart=["the_vert"],
        notes_base=["vetiver_haiti"],
        thumbnail="https://images.unsplash.com/photo-1541643600914-78b084683601?w=800&auto=format&fit=crop",
        new_arrival=True,
    ),
]


@app.post("/api/seed")
def seed():
    count = storage()["fragrance"].count_documents({})
    if count > 0:
        return {"inserted": 0}
    inserted = 0
    for s in SAMPLES:
        create_document("fragrance", prepare_fragrance(s))
        inserted += 1
    logger.info("Seeded %d fragrances", inserted)
    return {"inserted": inserted}


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
