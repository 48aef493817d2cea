from .base import Notification, NotificationLevel, RequestSequencer
from .daily_report import DailyReportScreen
from .discharge import DischargeForm, DischargeScreen

__all__ = [
    "Notification",
    "NotificationLevel",
    "RequestSequencer",
    "DailyReportScreen",
    "DischargeForm",
    "DischargeScreen",
]
