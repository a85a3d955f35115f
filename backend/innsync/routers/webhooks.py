"""
Webhook endpoint management routes
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from innsync.database import get_db
from innsync.models.hotel import Staff
from innsync.models.schemas import (
    WebhookCreate, WebhookUpdate, WebhookResponse, WebhookCreatedResponse, WebhookDeliveryResult
)
from innsync.routers import http_error
from innsync.security import permissions as perm
from innsync.security.auth import require_permission
from innsync.services.webhook_service import WebhookService, webhook_dispatcher

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])


@router.get("", response_model=List[WebhookResponse])
def list_webhooks(
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.WEBHOOK_MANAGE))
):
    return WebhookService(db).get_webhooks()


@router.post("", response_model=WebhookCreatedResponse)
def register_webhook(
    data: WebhookCreate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.WEBHOOK_MANAGE))
):
    """The signing secret is only returned here"""
    try:
        return WebhookService(db).register_webhook(data)
    except ValueError as e:
        raise http_error(e)


@router.get("/{webhook_id}", response_model=WebhookResponse)
def get_webhook(
    webhook_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.WEBHOOK_MANAGE))
):
    webhook = WebhookService(db).get_webhook(webhook_id)
    if not webhook:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Webhook tidak ditemukan")
    return webhook


@router.put("/{webhook_id}", response_model=WebhookResponse)
def update_webhook(
    webhook_id: int,
    data: WebhookUpdate,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.WEBHOOK_MANAGE))
):
    try:
        return WebhookService(db).update_webhook(webhook_id, data)
    except ValueError as e:
        raise http_error(e)


@router.delete("/{webhook_id}")
def delete_webhook(
    webhook_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.WEBHOOK_MANAGE))
):
    try:
        WebhookService(db).delete_webhook(webhook_id)
        return {"message": "Webhook dihapus"}
    except ValueError as e:
        raise http_error(e)


@router.post("/{webhook_id}/test", response_model=WebhookDeliveryResult)
def test_webhook(
    webhook_id: int,
    db: Session = Depends(get_db),
    current_user: Staff = Depends(require_permission(perm.WEBHOOK_MANAGE))
):
    webhook = WebhookService(db).get_webhook(webhook_id)
    if not webhook:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Webhook tidak ditemukan")
    return webhook_dispatcher.test_webhook(webhook)
