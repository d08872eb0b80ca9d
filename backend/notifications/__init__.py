"""
Scheduled notification jobs for Voluna.

This module handles:
- Reminder emails the day before an opportunity
- Roll-call prompts for organizers shortly before an opportunity starts
- Daily sign-up digests for organizations and senior project owners
- Sending email via Resend
"""

from .reminders import send_reminder_emails
from .roll_call import send_roll_call_emails
from .daily_digest import send_organization_digests, send_senior_project_digests

__all__ = [
    'send_reminder_emails',
    'send_roll_call_emails',
    'send_organization_digests',
    'send_senior_project_digests',
]
