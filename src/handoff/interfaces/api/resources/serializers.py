"""JSON shapes shared by API resources."""

from handoff.application.dto.finalize_result import FinalizeResult
from handoff.domain.entities import Delivery


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def delivery_to_dict(d: Delivery) -> dict:
    return {
        "id": str(d.id),
        "tenant_id": str(d.tenant_id),
        "status": d.status.value,
        "business_name": d.business_name,
        "signer_name": d.signer_name,
        "doc_number": d.doc_number,
        "recipient_email": d.recipient_email,
        "has_signature": d.signature_ref is not None,
        "has_original": d.original_doc_ref is not None,
        "finalized": d.final_doc_ref is not None,
        "original_hash": d.original_hash,
        "created_at": _iso(d.created_at),
        "signed_at": _iso(d.signed_at),
        "finalized_at": _iso(d.finalized_at),
    }


def finalize_to_dict(result: FinalizeResult | None) -> dict:
    if result is None:
        return {"finalized": False, "outcome": None, "reason": None}
    return {
        "finalized": result.finalized,
        "outcome": result.outcome.value,
        "reason": result.reason,
    }
