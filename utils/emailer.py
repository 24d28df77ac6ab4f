import smtplib
from email.message import EmailMessage

from flask import current_app

from utils.logger import get_logger

logger = get_logger()


def _smtp_settings():
    cfg = current_app.config
    return {
        "host": cfg.get("SMTP_HOST"),
        "port": cfg.get("SMTP_PORT", 587),
        "username": cfg.get("SMTP_USERNAME"),
        "password": cfg.get("SMTP_PASSWORD"),
        "sender": cfg.get("SMTP_FROM_EMAIL") or cfg.get("SMTP_USERNAME"),
        "starttls": cfg.get("SMTP_USE_TLS", True),
    }


def send_email(to_email: str, subject: str, body: str):
    """
    Send a plain-text email. Returns (ok, error); never raises, so a mail
    outage cannot fail the request that triggered it.
    """
    smtp = _smtp_settings()
    if not smtp["host"] or not smtp["sender"]:
        logger.info(f"Email not configured, skipped '{subject}' to {to_email}")
        return False, "Email not configured"
    if not to_email:
        return False, "No recipient"

    msg = EmailMessage()
    msg["From"] = f"WB-Rent <{smtp['sender']}>"
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(body, charset="utf-8")

    try:
        with smtplib.SMTP(smtp["host"], smtp["port"], timeout=10) as server:
            if smtp["starttls"]:
                server.starttls()
            if smtp["username"] and smtp["password"]:
                server.login(smtp["username"], smtp["password"])
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        logger.error(f"Sending '{subject}' to {to_email} failed: {exc}")
        return False, str(exc)

    logger.debug(f"Sent '{subject}' to {to_email}")
    return True, None
