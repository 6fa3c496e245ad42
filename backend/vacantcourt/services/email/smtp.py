"""
Send court-available emails via SMTP (Google Gmail or other).
Set EMAIL_PROVIDER=smtp plus SMTP_USER, SMTP_PASSWORD (and optionally NOTIFY_FROM) in .env.
Use a Gmail App Password (not your normal password).
"""
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

from vacantcourt.core.constants import EMAIL_SEND_TIMEOUT_SECONDS
from vacantcourt.core.errors import EmailDispatchError

logger = logging.getLogger(__name__)


def render_court_available(template_params: dict[str, str]) -> tuple[str, str, str]:
    """(subject, plain body, html body) for one court-available notification."""
    court_name = template_params.get("court_name") or "your court"
    sub_courts = template_params.get("sub_court_names") or ""
    url = template_params.get("court_url") or ""
    subject = f"A court is now available at {court_name}!"
    lines = ["Hello!", ""]
    if sub_courts:
        lines.append(f"A court ({sub_courts}) has just become available at {court_name}.")
    else:
        lines.append(f"A court has just become available at {court_name}.")
    if url:
        lines += ["", f"Head to VacantCourt to check it out: {url}"]
    plain = "\n".join(lines)
    court_html = f"<strong>{escape(court_name)}</strong>"
    html = f"<p>Hello!</p><p>A court ({escape(sub_courts)}) has just become available at {court_html}.</p>"
    if url:
        html += f'<p><a href="{escape(url)}">Head to VacantCourt to check it out!</a></p>'
    return subject, plain, html


class SmtpDispatcher:
    provider_id = "smtp"

    def __init__(
        self,
        *,
        host: str,
        port: int,
        user: str,
        password: str,
        from_address: str = "",
        timeout: float = EMAIL_SEND_TIMEOUT_SECONDS,
    ) -> None:
        self.host = host
        self.port = port
        self.user = (user or "").strip()
        self.password = (password or "").strip()
        self.from_address = (from_address or "").strip() or self._default_from()
        self._timeout = timeout

    def _default_from(self) -> str:
        if self.user:
            return f"VacantCourt <{self.user}>"
        return "VacantCourt <noreply@localhost>"

    def send(self, to_email: str, template_params: dict[str, str]) -> None:
        to_email = (to_email or "").strip()
        if not to_email:
            raise EmailDispatchError("No recipient address")
        if not self.user or not self.password:
            raise EmailDispatchError("SMTP_USER or SMTP_PASSWORD not set")
        subject, plain, html = render_court_available(template_params)
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.from_address
        msg["To"] = to_email
        msg.attach(MIMEText(plain, "plain"))
        msg.attach(MIMEText(html, "html"))
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self._timeout) as server:
                server.starttls()
                server.login(self.user, self.password)
                server.sendmail(self.user, [to_email], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise EmailDispatchError(f"SMTP send to {to_email} failed: {e}") from e
        logger.info("Email sent to %s: %s", to_email, subject)
