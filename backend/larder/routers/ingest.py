import base64
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from larder.database import get_db
from larder.errors import InvariantError
from larder.models.user import User
from larder.schemas.ingest import ExtractedItem, IngestResponse, ParseTextRequest
from larder.services import pantry as pantry_service
from larder.services.kitchen_ai import KitchenAI, get_kitchen_ai
from larder.utils.auth import get_current_user, get_household_id

logger = logging.getLogger(__name__)

router = APIRouter()

RECEIPT_MEDIA_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")


def _respond(
    db: Session,
    user: User,
    household_id: UUID,
    items: list[ExtractedItem],
) -> dict:
    """Preview the parsed items, or add them straight away when the user opted in."""
    if not user.auto_add_items:
        return {"items": items, "auto_added": False}
    results = pantry_service.add_batch(
        db, household_id, [i.to_batch_item() for i in items], added_by=user.id,
    )
    logger.info(f"Auto-added {sum(1 for r in results if r['success'])}/{len(results)} ingested items")
    return {"items": items, "auto_added": True, "results": results}


@router.post("/text", response_model=IngestResponse)
async def ingest_text(
    body: ParseTextRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    household_id: UUID = Depends(get_household_id),
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    items = await ai.parse_text_list(body.text)
    return _respond(db, current_user, household_id, items)


@router.post("/receipt", response_model=IngestResponse)
async def ingest_receipt(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    household_id: UUID = Depends(get_household_id),
    ai: KitchenAI = Depends(get_kitchen_ai),
):
    media_type = file.content_type or "image/jpeg"
    if media_type not in RECEIPT_MEDIA_TYPES:
        raise InvariantError(f"Unsupported image type: {media_type}")
    content = await file.read()
    if not content:
        raise InvariantError("Uploaded file is empty")

    image_base64 = base64.standard_b64encode(content).decode("utf-8")
    items = await ai.extract_items_from_receipt(image_base64, media_type)
    return _respond(db, current_user, household_id, items)
