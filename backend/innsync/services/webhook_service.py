"""
Webhook service - endpoint registry and signed event delivery

Every active endpoint subscribed to an event receives a POST with the JSON
body {event, timestamp, data, webhook_id}. The body is signed with the
endpoint secret (HMAC-SHA256) in the X-InnSync-Signature header.
Delivery is best-effort: failures are logged and never retried.
"""
import hashlib
import hmac
import json
import logging
import secrets
from datetime import datetime
from typing import Callable, List, Optional

import httpx
from sqlalchemy.orm import Session

from innsync.config import settings
from innsync.database import SessionLocal
from innsync.models.events import EventType
from innsync.models.system import WebhookEndpoint
from innsync.models.schemas import WebhookCreate, WebhookUpdate
from innsync.services.event_bus import Event, event_bus

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-InnSync-Signature"


def sign_payload(body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def verify_signature(body: bytes, signature: str, secret: str) -> bool:
    """Check a received signature header against the body (constant time)"""
    if not signature:
        return False
    return hmac.compare_digest(sign_payload(body, secret), signature)


def build_payload(event_type: str, data: dict, webhook_id: int, timestamp: Optional[datetime] = None) -> bytes:
    payload = {
        "event": event_type,
        "timestamp": (timestamp or datetime.utcnow()).isoformat(),
        "data": data,
        "webhook_id": webhook_id,
    }
    return json.dumps(payload, default=str).encode("utf-8")


class WebhookService:

    def __init__(self, db: Session):
        self.db = db

    def get_webhooks(self, active_only: bool = False) -> List[WebhookEndpoint]:
        query = self.db.query(WebhookEndpoint)
        if active_only:
            query = query.filter(WebhookEndpoint.active == True)  # noqa: E712
        return query.order_by(WebhookEndpoint.id).all()

    def get_webhook(self, webhook_id: int) -> Optional[WebhookEndpoint]:
        return self.db.query(WebhookEndpoint).filter(WebhookEndpoint.id == webhook_id).first()

    def get_subscribers(self, event_type: str) -> List[WebhookEndpoint]:
        return [w for w in self.get_webhooks(active_only=True) if event_type in (w.events or [])]

    def register_webhook(self, data: WebhookCreate) -> WebhookEndpoint:
        if not data.url.startswith(("http://", "https://")):
            raise ValueError("URL webhook harus diawali http:// atau https://")

        webhook = WebhookEndpoint(
            url=data.url,
            events=[e.value for e in data.events],
            secret=data.secret or secrets.token_hex(32),
            active=data.active,
        )
        self.db.add(webhook)
        self.db.commit()
        self.db.refresh(webhook)
        logger.info(f"Registered webhook {webhook.id} for {webhook.events}")
        return webhook

    def update_webhook(self, webhook_id: int, data: WebhookUpdate) -> WebhookEndpoint:
        webhook = self.get_webhook(webhook_id)
        if not webhook:
            raise ValueError("Webhook tidak ditemukan")

        update_data = data.model_dump(exclude_unset=True)
        if "url" in update_data and not update_data["url"].startswith(("http://", "https://")):
            raise ValueError("URL webhook harus diawali http:// atau https://")
        if "events" in update_data:
            update_data["events"] = [EventType(e).value for e in update_data["events"]]

        for key, value in update_data.items():
            setattr(webhook, key, value)
        self.db.commit()
        self.db.refresh(webhook)
        return webhook

    def delete_webhook(self, webhook_id: int) -> bool:
        webhook = self.get_webhook(webhook_id)
        if not webhook:
            raise ValueError("Webhook tidak ditemukan")
        self.db.delete(webhook)
        self.db.commit()
        return True


class WebhookDispatcher:
    """
    Subscribes to domain events and fans them out to registered endpoints

    Both the session factory and the HTTP client factory are injectable so
    tests can run against an in-memory database and httpx.MockTransport.
    """

    def __init__(self, db_session_factory: Callable = None, client_factory: Callable = None):
        self._db_session_factory = db_session_factory or SessionLocal
        self._client_factory = client_factory
        self._registered = False

    def configure(self, db_session_factory: Callable = None, client_factory: Callable = None) -> None:
        if db_session_factory is not None:
            self._db_session_factory = db_session_factory
        if client_factory is not None:
            self._client_factory = client_factory

    def _client(self) -> httpx.Client:
        if self._client_factory:
            return self._client_factory()
        return httpx.Client(timeout=settings.WEBHOOK_TIMEOUT)

    def deliver(self, webhook: WebhookEndpoint, event_type: str, data: dict,
                timestamp: Optional[datetime] = None) -> dict:
        """POST one event to one endpoint; never raises"""
        body = build_payload(event_type, data, webhook.id, timestamp)
        headers = {
            "Content-Type": "application/json",
            "User-Agent": settings.WEBHOOK_USER_AGENT,
            SIGNATURE_HEADER: sign_payload(body, webhook.secret),
        }
        try:
            with self._client() as client:
                response = client.post(webhook.url, content=body, headers=headers)
            success = response.is_success
            if not success:
                logger.warning(f"Webhook {webhook.id} returned {response.status_code} for {event_type}")
            return {"webhook_id": webhook.id, "success": success, "status_code": response.status_code, "error": None}
        except httpx.HTTPError as e:
            logger.warning(f"Webhook {webhook.id} delivery failed for {event_type}: {e}")
            return {"webhook_id": webhook.id, "success": False, "status_code": None, "error": str(e)}

    def dispatch(self, event: Event) -> List[dict]:
        db = self._db_session_factory()
        try:
            webhooks = WebhookService(db).get_subscribers(event.event_type)
            return [self.deliver(w, event.event_type, event.data, event.timestamp) for w in webhooks]
        except Exception as e:
            logger.error(f"Webhook dispatch failed for {event.event_type}: {e}", exc_info=True)
            return []
        finally:
            db.close()

    def test_webhook(self, webhook: WebhookEndpoint) -> dict:
        """Send a sample event so the receiver can check connectivity and signatures"""
        data = {"message": "Test webhook dari InnSync", "test": True}
        event_type = webhook.events[0] if webhook.events else EventType.RESERVATION_CREATED.value
        return self.deliver(webhook, event_type, data)

    def register(self, event_bus_instance=None) -> None:
        if self._registered:
            return
        bus = event_bus_instance or event_bus
        for event_type in EventType:
            bus.subscribe(event_type.value, self.dispatch)
        self._registered = True
        logger.info("Webhook dispatcher registered")

    def unregister(self, event_bus_instance=None) -> None:
        bus = event_bus_instance or event_bus
        for event_type in EventType:
            bus.unsubscribe(event_type.value, self.dispatch)
        self._registered = False


webhook_dispatcher = WebhookDispatcher()
