from flask import Blueprint, request, jsonify

from services import promo_policy
from services.errors import PromoRejected, ValidationFailed, INVALID_CODE
from services.validation import parse_amount
from utils.audit import log_event

promo_bp = Blueprint("promo", __name__, url_prefix="/api/promo")


def _require_code(data) -> str:
    code = data.get("code")
    if not isinstance(code, str) or not code.strip():
        raise ValidationFailed([{"field": "code", "message": "Promo code is required"}])
    return code


# Preview only: nothing is reserved, a later booking can still fail
@promo_bp.post("/validate")
def validate_promo():
    data = request.get_json(silent=True) or {}
    try:
        code = _require_code(data)
        amount = parse_amount(data.get("amount"))
    except ValidationFailed as exc:
        return jsonify(valid=False, **exc.to_dict()), exc.status_code

    try:
        quote = promo_policy.evaluate(code, amount)
    except PromoRejected as exc:
        log_event("PROMO_REJECT", entity="promo_code", entity_id=promo_policy.canonical_code(code), metadata={"reason": exc.reason})
        # unknown code reads as a missing resource, other rejections as bad requests
        status = 404 if exc.reason == INVALID_CODE else exc.status_code
        return jsonify(valid=False, **exc.to_dict()), status

    log_event("PROMO_VALIDATE", entity="promo_code", entity_id=quote.code, metadata={"amount": str(amount), "discount": str(quote.discount)})
    return jsonify(quote.to_dict()), 200
