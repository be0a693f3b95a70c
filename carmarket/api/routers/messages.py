# carmarket/api/routers/messages.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from carmarket.api.deps import get_current_user, get_notification_service, require_staff
from carmarket.data.database import get_db
from carmarket.data.models.user import UserModel
from carmarket.domain.schemas import (
    MarkConversationIn,
    MarkConversationOut,
    MessageIn,
    MessageOut,
    RemoveMessageIn,
    UnreadCountOut,
)
from carmarket.services.message_service import MessageBlocked, MessageService
from carmarket.services.notification_service import NotificationService

router = APIRouter(prefix="/api", tags=["messages"])

NO_CACHE = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def get_service(db: Session, notifications: NotificationService | None = None):
    return MessageService(db, notifications)


@router.post("/messages", response_model=MessageOut, status_code=201)
def send_message(
    payload: MessageIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    notifications: NotificationService = Depends(get_notification_service),
):
    svc = get_service(db, notifications)
    try:
        return svc.send(payload, user)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MessageBlocked as e:
        raise HTTPException(status_code=400, detail={"message": str(e), "blocked": True})
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/messages", response_model=List[MessageOut])
def my_messages(
    response: Response,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    # clients poll this, stale caches hide new messages
    response.headers.update(NO_CACHE)
    return get_service(db).list_for_user(user.id)


@router.get("/messages/all", response_model=List[MessageOut])
def all_messages(
    user: UserModel = Depends(require_staff),
    db: Session = Depends(get_db),
):
    return get_service(db).list_all()


@router.get("/messages/unread-count", response_model=UnreadCountOut)
def unread_count(
    response: Response,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    response.headers.update(NO_CACHE)
    return {"count": get_service(db).unread_count(user.id)}


@router.patch("/messages/{message_id}/read", response_model=MessageOut)
def mark_message_read(
    message_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        return svc.mark_read(message_id, user)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))


@router.post("/messages/mark-read", response_model=MarkConversationOut)
def mark_conversation_read(
    payload: MarkConversationIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    marked = get_service(db).mark_conversation_read(
        payload.car_id, payload.buyer_id, payload.seller_id, user
    )
    return {"success": True, "marked_count": marked}


@router.post("/admin/remove-message")
def remove_message(
    payload: RemoveMessageIn,
    user: UserModel = Depends(require_staff),
    db: Session = Depends(get_db),
):
    try:
        get_service(db).delete(payload.message_id, user)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True}
