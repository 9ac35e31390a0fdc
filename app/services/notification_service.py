# app/services/notification_service.py
from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień o fakturach.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_invoice_notification(user_id: int, invoice_id: int, status: str):
        try:
            send_invoice_notification_task.delay(user_id, invoice_id, status)
        except Exception as e:
            # faktura juz zapisana - brak brokera nie moze cofnac checkoutu
            logger.warning(f"Nie udalo sie zlecic powiadomienia dla faktury {invoice_id}: {e}")


@celery_app.task(name="app.services.notification_service.send_invoice_notification_task")
def send_invoice_notification_task(user_id: int, invoice_id: int, status: str):
    """
    Celery task - w prawdziwym systemie wysłałby email/SMS/push.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Invoice {invoice_id} is {status}")
    return {"user_id": user_id, "invoice_id": invoice_id, "status": status}
