"""Backup: export every group as JSON, import a backup over the current data."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from billsplit.database import get_db
from billsplit.errors import ValidationError
from billsplit.models import Group
from billsplit.schemas import GroupResponse, GroupSnapshot
from billsplit.services.ledger import validate_snapshot
from billsplit.services.snapshots import group_snapshot, name_key, normalize, restore_group
from billsplit.routers.groups import group_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("/export", response_model=list[GroupSnapshot])
def export_backup(db: Session = Depends(get_db)):
    groups = db.query(Group).order_by(Group.id).all()
    payload = [group_snapshot(g).model_dump(mode="json") for g in groups]
    return JSONResponse(
        payload,
        headers={"Content-Disposition": "attachment; filename=bill_splitter_backup.json"},
    )


@router.post("/import", response_model=list[GroupResponse])
def import_backup(data: list[GroupSnapshot], db: Session = Depends(get_db)):
    snapshots = [normalize(s) for s in data]
    seen = set()
    for snapshot in snapshots:
        validate_snapshot(snapshot)
        key = name_key(snapshot.name)
        if key in seen:
            raise ValidationError(f"Group {snapshot.name} appears more than once")
        seen.add(key)

    for group in db.query(Group).all():
        db.delete(group)
    db.flush()
    groups = [restore_group(db, snapshot) for snapshot in snapshots]
    db.commit()
    logger.info("imported %d groups", len(groups))
    return [group_response(g) for g in groups]
