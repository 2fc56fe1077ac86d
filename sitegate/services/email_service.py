"""Thin SMTP wrapper used for contact form notifications."""

from __future__ import annotations

import smtplib
from email.message import EmailMessage
from typing import Iterable, Optional, Sequence

from flask import has_app_context

from sitegate.app.settings import get_app_settings
from sitegate.utils.logs import logger


def _normalise_recipients(recipients: Iterable[str]) -> Sequence[str]:
    unique = []
    seen = set()
    for recipient in recipients:
        if not recipient:
            continue
        value = recipient.strip()
        if not value or value in seen:
            continue
        unique.append(value)
        seen.add(value)
    return unique


def send_email(
    subject: str,
    body: str,
    recipients: Iterable[str],
    *,
    reply_to: Optional[str] = None,
) -> bool:
    """Send an email using the SMTP settings of the current application."""

    normalised = _normalise_recipients(recipients)
    if not normalised:
        logger.debug("Nenhum destinatário válido para enviar email")
        return False

    if not has_app_context():
        logger.warning("Tentativa de envio de email fora do contexto da aplicação")
        return False

    settings = get_app_settings()
    if not settings.features.enable_email:
        logger.info("Envio de email desativado pelas configurações da aplicação")
        return False

    mail = settings.mail
    if mail.suppress_send:
        logger.info("Envio de email suprimido (MAIL__SUPPRESS_SEND=True)")
        return True

    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = mail.default_sender
    message["To"] = ", ".join(normalised)
    if reply_to:
        message["Reply-To"] = reply_to
    message.set_content(body)

    try:
        if mail.use_ssl:
            smtp = smtplib.SMTP_SSL(mail.server, mail.port, timeout=10)
        else:
            smtp = smtplib.SMTP(mail.server, mail.port, timeout=10)

        with smtp:
            if mail.use_tls and not mail.use_ssl:
                smtp.starttls()
            if mail.username and mail.password:
                smtp.login(mail.username, mail.password)
            smtp.send_message(message)
        logger.info("Email enviado para %s", normalised)
        return True
    except Exception:
        logger.exception("Erro ao enviar email para %s", normalised)
        return False


def notify_new_contact(contact) -> bool:
    """Tell the site owner about a new contact submission."""

    settings = get_app_settings()
    recipient = settings.mail.notify_to
    if not recipient:
        logger.debug("MAIL__NOTIFY_TO não definido; notificação de contacto ignorada")
        return False

    body = (
        f"Name: {contact.name}\n"
        f"Email: {contact.email}\n"
        f"Service: {contact.service or '-'}\n\n"
        f"{contact.message}\n"
    )
    return send_email(
        f"New contact from {contact.name}",
        body,
        [recipient],
        reply_to=contact.email,
    )


__all__ = ["notify_new_contact", "send_email"]
