from decimal import Decimal, InvalidOperation

from flask import Blueprint, request, jsonify

from models.experience import Experience
from services import inventory

experiences_bp = Blueprint("experiences", __name__, url_prefix="/api/experiences")


def _parse_price(name: str):
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    value = Decimal(raw)
    if not value.is_finite():
        raise InvalidOperation(name)
    return value


def _experience_dict(e: Experience) -> dict:
    return {
        "id": e.id,
        "title": e.title,
        "description": e.description,
        "location": e.location,
        "category": e.category,
        "price": float(e.price),
        "duration": e.duration,
        "image": e.image,
        "rating": e.rating,
        "reviewCount": e.review_count,
        "highlights": list(e.highlights or []),
        "included": list(e.included or []),
        "createdAt": e.created_at.isoformat(),
        "updatedAt": e.updated_at.isoformat(),
    }


@experiences_bp.get("")
def list_experiences():
    category = (request.args.get("category") or "").strip() or None
    search = (request.args.get("search") or "").strip() or None
    try:
        min_price = _parse_price("minPrice")
        max_price = _parse_price("maxPrice")
    except InvalidOperation:
        return jsonify(error="minPrice and maxPrice must be numbers"), 400

    rows = inventory.list_experiences(
        category=category,
        min_price=min_price,
        max_price=max_price,
        search=search,
    )
    return jsonify([_experience_dict(e) for e in rows]), 200


@experiences_bp.get("/<experience_id>")
def get_experience(experience_id: str):
    experience = inventory.get_experience(experience_id)

    out = _experience_dict(experience)
    out["slotsByDate"] = inventory.slots_by_date(experience.id)
    return jsonify(out), 200
