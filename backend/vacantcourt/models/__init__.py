from vacantcourt.models.facility import Facility
from vacantcourt.models.notification_request import NotificationRequest
from vacantcourt.models.sub_court import SubCourt
from vacantcourt.models.user_account import UserAccount

__all__ = [
    "Facility",
    "NotificationRequest",
    "SubCourt",
    "UserAccount",
]
