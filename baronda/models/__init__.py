from baronda.core.database import Base
from baronda.models.staff import Staff
from baronda.models.user import User
from baronda.models.otp import OtpRecord
from baronda.models.report import Report, ReportReply
from baronda.models.schedule import Schedule
from baronda.models.due import Due
from baronda.models.honorarium import Honorarium
from baronda.models.notification import Notification
from baronda.models.announcement import Announcement
from baronda.models.emergency_contact import EmergencyContact
from baronda.models.admin_log import AdminLog
from baronda.models.app_setting import AppSetting
from baronda.models.admin_verification import AdminVerification
from baronda.models.shortlink import ShortLink

__all__ = [
    "Base",
    "Staff",
    "User",
    "OtpRecord",
    "Report",
    "ReportReply",
    "Schedule",
    "Due",
    "Honorarium",
    "Notification",
    "Announcement",
    "EmergencyContact",
    "AdminLog",
    "AppSetting",
    "AdminVerification",
    "ShortLink",
]
