"""Public contact form endpoint."""
from __future__ import annotations

from flask import Blueprint

from sitegate.app.errors import ApiValidationError
from sitegate.app.routes.api.common import (
    REQUIRED_MESSAGE,
    client_context,
    content,
    event_log,
    fail,
    ok,
    parse_body,
)
from sitegate.app.routes.api.schemas import ContactSubmission
from sitegate.services.email_service import notify_new_contact
from sitegate.services.security.rate_limit import contact_limit
from sitegate.utils.logs import logger

contact_api_bp = Blueprint("api_contact", __name__)

REQUIRED_FIELDS = "Please fill in all required fields"


@contact_api_bp.route("/contact", methods=["POST"])
@contact_limit
def submit_contact():
    try:
        submission = parse_body(ContactSubmission)
    except ApiValidationError as exc:
        message = REQUIRED_FIELDS if REQUIRED_MESSAGE in exc.errors.values() else "Invalid contact data"
        return fail(message, 400, errors=exc.errors)

    context = client_context()
    try:
        contact = content().save_contact(
            submission.model_dump(), ip=context["ip"], user_agent=context["userAgent"]
        )
    except Exception:
        logger.exception("Erro ao guardar contacto de %s", submission.email)
        return fail("Error saving your message. Please try again.", 500)

    event_log().log(
        "contact_form_submit",
        {"contactId": contact.id, "service": contact.service, "ip": context["ip"]},
    )
    logger.info("Novo contacto %s de %s", contact.id, contact.email)
    notify_new_contact(contact)

    return ok(
        {"contactId": contact.id},
        "Message received! We will get back to you soon.",
    )
