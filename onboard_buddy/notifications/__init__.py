"""
Notifications - in-app notification log and due-date sweep.
"""

from onboard_buddy.notifications.center import NotificationCenter
from onboard_buddy.notifications.due_dates import sweep_due_dates
from onboard_buddy.notifications.models import Notification, NotificationType

__all__ = ["Notification", "NotificationCenter", "NotificationType", "sweep_due_dates"]
