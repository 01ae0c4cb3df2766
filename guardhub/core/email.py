"""
guardhub/core/email.py

Email Sending Utilities

Renders Jinja2 templates and sends them through SendGrid:
- Lead notification to the sales inbox
- Welcome email for newly registered company admins
- Staff account invitation
"""

import logging
from datetime import datetime
from typing import Any

from fastapi import HTTPException
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import EmailStr
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import From, Mail, To

from guardhub.core.config import settings

logger = logging.getLogger(__name__)

jinja_env: Environment | None = None
try:
    template_dir = settings.mail_templates_path
    if not template_dir.is_dir():
        raise FileNotFoundError(f"Email template directory not found: {template_dir}")

    jinja_env = Environment(
        loader=FileSystemLoader(template_dir),
        autoescape=select_autoescape(["html", "xml"]),
    )
    logger.info(f"Jinja2 environment initialized with templates in: {template_dir}")
except Exception:
    logger.exception("Failed to initialize Jinja2 environment")
    jinja_env = None


def _render_template(template_name: str, context: dict[str, Any]) -> str:
    """
    Renders an email template using Jinja2 with the shared context
    (year, app name, base URL, support address) merged in.
    """
    if not jinja_env:
        logger.error("Jinja2 environment not available")
        raise RuntimeError("Email template environment not initialized")

    try:
        template = jinja_env.get_template(template_name)
        full_context = {
            "year": datetime.now().year,
            "app_name": settings.APP_NAME,
            "base_url": str(settings.BASE_URL).rstrip("/"),
            "support_email": str(settings.SUPPORT_EMAIL),
            **context,
        }
        rendered_content = template.render(full_context)
        logger.debug(f"Successfully rendered template: {template_name}")
        return rendered_content
    except Exception as e:
        logger.error(f"Failed to render template '{template_name}': {str(e)}")
        raise ValueError(f"Failed to render email template {template_name}") from e


async def _send_email(to_email: EmailStr | str, subject: str, html_content: str) -> None:
    """
    Sends an email using the SendGrid API. No-op (with a warning) when
    EMAILS_ENABLED is false.
    """
    if not settings.EMAILS_ENABLED:
        logger.warning(
            f"Email sending disabled. Skipping send to {to_email} for subject '{subject}'"
        )
        return

    if not all([settings.SENDGRID_API_KEY, settings.MAIL_FROM]):
        logger.error("SendGrid API Key or MAIL_FROM setting is missing")
        raise HTTPException(status_code=500, detail="Email service configuration missing")

    message = Mail(
        from_email=From(email=str(settings.MAIL_FROM), name=settings.MAIL_FROM_NAME),
        to_emails=To(str(to_email)),
        subject=subject,
        html_content=html_content,
    )

    try:
        sg = SendGridAPIClient(settings.SENDGRID_API_KEY)
        response = sg.client.mail.send.post(request_body=message.get())
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {str(e)}")
        raise HTTPException(
            status_code=500, detail="An unexpected error occurred while sending the email"
        )

    logger.info(f"Email sent to {to_email} for subject '{subject}' with status code {response.status_code}")
    if response.status_code >= 300:
        logger.error(f"SendGrid API error: Status={response.status_code}, Body={response.body}")
        raise HTTPException(status_code=500, detail="Failed to send email via provider")


async def send_lead_notification(lead: dict[str, Any]) -> None:
    """
    Notifies the sales inbox of a new contact-form submission.

    Args:
        lead (dict[str, Any]): name, email, company, phone, product_interest, message.
    """
    subject = f"New Lead Submission - {lead.get('name')}"
    context = {
        "lead": lead,
        "submitted_at": datetime.now().strftime("%Y-%m-%d %H:%M"),
    }
    html_content = _render_template("lead_notification.html", context)
    await _send_email(settings.LEADS_NOTIFICATION_EMAIL, subject, html_content)
    logger.info(f"[LEAD] Notification sent for lead from {lead.get('email')}")


async def send_company_welcome_email(to_email: EmailStr | str, full_name: str, company_name: str, company_code: str) -> None:
    """Sends the company admin their company code after signup."""
    subject = f"Welcome to {settings.APP_NAME}"
    context = {
        "full_name": full_name,
        "company_name": company_name,
        "company_code": company_code,
        "login_url": f"{str(settings.BASE_URL).rstrip('/')}/login",
    }
    html_content = _render_template("company_welcome.html", context)
    await _send_email(to_email, subject, html_content)
    logger.info(f"Company welcome email sent to {to_email}")


async def send_staff_invitation(
    to_email: EmailStr | str, full_name: str, company_name: str, company_code: str, staff_code: str
) -> None:
    """Tells a newly created guard or manager how to sign in."""
    subject = f"Your {company_name} account on {settings.APP_NAME}"
    context = {
        "full_name": full_name,
        "company_name": company_name,
        "company_code": company_code,
        "staff_code": staff_code,
        "login_url": f"{str(settings.BASE_URL).rstrip('/')}/login",
    }
    html_content = _render_template("staff_invitation.html", context)
    await _send_email(to_email, subject, html_content)
    logger.info(f"Staff invitation sent to {to_email}")
