"""
Note Endpoints

CRUD operations for notes within the caller's tenant.

TENANT_ISOLATION: every query filters on the tenant_id from the verified
token. A note that exists in another tenant is reported exactly like a
missing one (404), so ids never leak across tenants.

Both roles (admin, member) have full CRUD on their tenant's notes.
Creation additionally passes the subscription gate.
"""
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from notes_api.api.deps import enforce_note_limit, get_current_identity
from notes_api.core.exceptions import NoteNotFoundError
from notes_api.database import get_db
from notes_api.models.note import Note
from notes_api.models.tenant import Tenant
from notes_api.schemas.auth import Identity
from notes_api.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from notes_api.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


def _get_scoped_note(db: Session, note_id: str, identity: Identity) -> Note:
    note = db.query(Note).filter(
        Note.id == note_id,
        Note.tenant_id == identity.tenant_id  # CRITICAL: Tenant isolation
    ).first()

    if not note:
        raise NoteNotFoundError()
    return note


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    note_data: NoteCreate,
    tenant: Tenant = Depends(enforce_note_limit),
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """
    Create a note owned by the caller.

    Author and tenant come from the token; the body supplies only
    title and content.
    """
    note = Note(
        tenant_id=identity.tenant_id,
        user_id=identity.user_id,
        title=note_data.title,
        content=note_data.content
    )

    db.add(note)
    db.commit()
    db.refresh(note)

    logger.info(f"Note created: {note.id} by {identity.user_id} (tenant={tenant.slug})")

    return note


@router.get("", response_model=List[NoteResponse])
async def list_notes(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """List all notes in the caller's tenant, newest first."""
    notes = db.query(Note).filter(
        Note.tenant_id == identity.tenant_id
    ).order_by(Note.created_at.desc()).all()

    logger.debug(f"Listed {len(notes)} notes for tenant {identity.tenant_id}")

    return notes


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    return _get_scoped_note(db, note_id, identity)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: str,
    note_data: NoteUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Replace title and/or content. Fields left out of the body are kept."""
    note = _get_scoped_note(db, note_id, identity)

    update_data = note_data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(note, field, value)

    db.commit()
    db.refresh(note)

    logger.info(f"Note updated: {note.id} by {identity.user_id}")

    return note


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    note = _get_scoped_note(db, note_id, identity)

    db.delete(note)
    db.commit()

    logger.info(f"Note deleted: {note_id} by {identity.user_id}")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
