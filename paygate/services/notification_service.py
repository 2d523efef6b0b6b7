"""
Receipt Notification Service

Emails a payment confirmation after a transaction is recorded.

Delivery is best-effort: the recorder only enqueues a job, the job runs on
the scheduler, and any SMTP failure ends in the log. Nothing here can fail
or delay a save-transaction response.
"""
import asyncio
import html
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from ..config import Settings
from ..models.transactions import Transaction
from .scheduler import NotificationScheduler

logger = logging.getLogger(__name__)


RECEIPT_SUBJECT = "Payment Confirmation"

RECEIPT_TEMPLATE = (
    "Hello {payer_name},\n\n"
    "Your transaction of {currency} {amount:.2f} for {service_type} was successful.\n"
    "Transaction ID: {transaction_id}\n\n"
    "Thank you for your business!"
)


class ReceiptMailer:
    """
    SMTP client for receipt emails (STARTTLS, login with app credentials).

    Args:
        host, port: SMTP server
        username, password: Login; mail is disabled when either is missing
        sender: From address (defaults to username)
        timeout: Socket timeout in seconds
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str],
        password: Optional[str],
        sender: Optional[str] = None,
        timeout: float = 10.0
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReceiptMailer":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.email_user,
            password=settings.email_pass,
            sender=settings.email_from,
            timeout=settings.smtp_timeout,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.username and self.password)

    def build_receipt(self, transaction: Transaction) -> EmailMessage:
        """
        Build the plain-text receipt.

        Stored fields are HTML-escaped; plain text shows them decoded.
        """
        message = EmailMessage()
        message["From"] = self.sender or ""
        message["To"] = html.unescape(transaction.payer_email)
        message["Subject"] = RECEIPT_SUBJECT
        message.set_content(RECEIPT_TEMPLATE.format(
            payer_name=html.unescape(transaction.payer_name),
            currency=transaction.currency,
            amount=transaction.amount,
            service_type=html.unescape(transaction.service_type or "your purchase"),
            transaction_id=html.unescape(transaction.transaction_id),
        ))
        return message

    def send(self, message: EmailMessage) -> None:
        """Blocking send; run it in a worker thread."""
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            smtp.login(self.username, self.password)
            smtp.send_message(message)


class ReceiptNotifier:
    """
    Enqueues receipt jobs on the scheduler and runs them.

    Args:
        scheduler: Started NotificationScheduler
        mailer: ReceiptMailer used by the job
    """

    def __init__(self, scheduler: NotificationScheduler, mailer: ReceiptMailer):
        self.scheduler = scheduler
        self.mailer = mailer

    def schedule_receipt(self, transaction: Transaction) -> str:
        """Hand the receipt to the scheduler; returns the job id."""
        job_id = f"receipt_{transaction.transaction_id}"
        self.scheduler.run_now(job_id, self.deliver, transaction=transaction)
        return job_id

    async def deliver(self, transaction: Transaction) -> bool:
        """
        Job body. Returns True if the email was sent.

        Never raises: failures are logged and reported as False.
        """
        if not self.mailer.enabled:
            logger.warning(
                f"Email not configured, skipping receipt for {transaction.transaction_id}"
            )
            return False

        try:
            message = self.mailer.build_receipt(transaction)
            await asyncio.to_thread(self.mailer.send, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                f"Error sending confirmation email for {transaction.transaction_id}: {e}"
            )
            return False

        logger.info(f"Confirmation email sent for {transaction.transaction_id}")
        return True
