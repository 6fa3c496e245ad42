"""
Email dispatchers: EmailJS (default) and SMTP.
Both take the same template params so the notify job stays provider-agnostic.
"""
from vacantcourt.config import Settings
from vacantcourt.services.email.base import EmailDispatcher
from vacantcourt.services.email.emailjs import EmailJSClient
from vacantcourt.services.email.smtp import SmtpDispatcher


def build_dispatcher(s: Settings) -> EmailDispatcher:
    """Dispatcher for EMAIL_PROVIDER. Does not check credentials (see config.missing_notify_settings)."""
    if s.email_provider == "smtp":
        return SmtpDispatcher(
            host=s.smtp_host,
            port=s.smtp_port,
            user=s.smtp_user,
            password=s.smtp_password,
            from_address=s.notify_from,
        )
    return EmailJSClient(
        service_id=s.emailjs_service_id,
        template_id=s.emailjs_template_id,
        public_key=s.emailjs_public_key,
        private_key=s.emailjs_private_key,
        api_url=s.emailjs_api_url,
    )


__all__ = ["EmailDispatcher", "EmailJSClient", "SmtpDispatcher", "build_dispatcher"]
