"""Protocol for email dispatchers. The notify job builds template params; dispatchers only deliver."""
from typing import Protocol


class EmailDispatcher(Protocol):
    """Single-recipient transactional send. Raises EmailDispatchError on any failure."""

    @property
    def provider_id(self) -> str:
        """e.g. 'emailjs', 'smtp' (used in logs)."""
        ...

    def send(self, to_email: str, template_params: dict[str, str]) -> None:
        """
        Deliver one court-available email. template_params carries to_email, court_name,
        sub_court_names (comma-joined) and court_url.
        """
        ...
