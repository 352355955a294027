# foodcourt/services/email_service.py
import asyncio
from email.message import EmailMessage
from typing import Any, Dict

import aiosmtplib
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from foodcourt.celery_worker import celery_app
from foodcourt.utils.settings import (
    EMAIL_FROM,
    EMAIL_HOST,
    EMAIL_PASS,
    EMAIL_PORT,
    EMAIL_TIMEOUT_SECONDS,
    EMAIL_USER,
)
from foodcourt.utils.logging import get_logger

logger = get_logger(__name__)


def smtp_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
        retry=retry_if_exception_type((aiosmtplib.SMTPException, OSError)),
    )


class EmailService:
    """
    Order confirmation e-mails.
    Best-effort: the mail goes through Celery, a broker outage is logged
    and the order stays created.
    """

    def queue_order_confirmation(self, email: str, summary: Dict[str, Any]) -> bool:
        try:
            #no publish retries and no result subscription, a dead broker fails fast
            send_order_confirmation_task.apply_async(
                args=(email, summary),
                retry=False,
                ignore_result=True,
            )
            return True
        except Exception as e:
            logger.error(f"Could not queue confirmation for order {summary.get('order_id')}: {e}")
            return False


def render_order_confirmation(summary: Dict[str, Any]) -> EmailMessage:
    lines = "\n".join(
        f"  {item['quantity']} x {item['name']} @ {item['price']}"
        for item in summary.get("items", [])
    )

    msg = EmailMessage()
    msg["Subject"] = f"Order Confirmation - ORD-{summary['order_id']}"
    msg["From"] = EMAIL_FROM
    msg.set_content(
        f"Thank you for your order!\n\n"
        f"Order: ORD-{summary['order_id']}\n"
        f"Status: {summary['status']}\n"
        f"Payment method: {summary['payment_method']}\n\n"
        f"Items:\n{lines}\n\n"
        f"Total: {summary['total_amount']}\n"
    )
    return msg


@smtp_retry()
def _deliver(msg: EmailMessage) -> None:
    #celery workers are sync, one short event loop per attempt
    asyncio.run(
        aiosmtplib.send(
            msg,
            hostname=EMAIL_HOST,
            port=EMAIL_PORT,
            username=EMAIL_USER or None,
            password=EMAIL_PASS or None,
            start_tls=True,
            timeout=EMAIL_TIMEOUT_SECONDS,
        )
    )


@celery_app.task(
    name="foodcourt.services.email_service.send_order_confirmation_task",
    ignore_result=True,
)
def send_order_confirmation_task(email: str, summary: Dict[str, Any]):
    msg = render_order_confirmation(summary)
    msg["To"] = email

    try:
        _deliver(msg)
    except Exception as e:
        #e-mail is best-effort, the order is already placed
        logger.error(f"Order confirmation to {email} failed: {e}")
        return {"email": email, "order_id": summary["order_id"], "status": "failed"}

    logger.info(f"Order confirmation for order {summary['order_id']} sent to {email}")
    return {"email": email, "order_id": summary["order_id"], "status": "sent"}
