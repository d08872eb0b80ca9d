"""
Email content for scheduled notifications.

Data preparation happens once in the ``_prepare_*`` helpers; the ``build_*``
functions only handle presentation and return subject, HTML and plain text.
"""

import os
from html import escape
from typing import Any, NamedTuple

from dotenv import load_dotenv

from models.opportunity import Opportunity
from models.signup import Organization, SeniorProject, SeniorProjectSignup, Signup
from shared.utils import estimate_hours, format_display_date, format_display_time

load_dotenv()

SITE_URL = os.getenv("SITE_URL", "https://www.voluna.org").rstrip("/")


class EmailContent(NamedTuple):
    subject: str
    html: str
    text: str


def _wrap_html(content: str, title: str) -> str:
    """Shared layout for all Voluna emails."""
    return f"""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            line-height: 1.6;
            color: #374151;
            margin: 0;
            padding: 0;
            background-color: #f9fafb;
        }}
        .email-container {{
            max-width: 600px;
            margin: 0 auto;
            background-color: #ffffff;
            box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);
        }}
        .header {{
            background: linear-gradient(135deg, #16a34a 0%, #22c55e 100%);
            padding: 40px 30px;
            text-align: center;
            color: white;
        }}
        .header h1 {{
            margin: 0;
            font-size: 28px;
            font-weight: 700;
        }}
        .content {{
            padding: 40px 30px;
        }}
        .highlight-box {{
            background-color: #f0fdf4;
            border: 1px solid #bbf7d0;
            border-radius: 12px;
            padding: 24px;
            margin: 24px 0;
        }}
        .warning-box {{
            background-color: #fef3c7;
            border: 1px solid #fde68a;
            border-radius: 12px;
            padding: 24px;
            margin: 24px 0;
        }}
        .detail-label {{
            font-size: 12px;
            color: #6b7280;
            text-transform: uppercase;
        }}
        .detail-value {{
            font-weight: 600;
            margin-bottom: 10px;
        }}
        .signup-item {{
            background-color: #f9fafb;
            border-left: 4px solid #16a34a;
            padding: 15px;
            margin: 10px 0;
        }}
        .cta-button {{
            display: inline-block;
            background-color: #16a34a;
            color: white;
            padding: 14px 28px;
            border-radius: 8px;
            text-decoration: none;
            font-weight: 600;
        }}
        .footer {{
            padding: 20px 30px;
            font-size: 13px;
            color: #6b7280;
            text-align: center;
        }}
    </style>
</head>
<body>
    <div class="email-container">
        <div class="header"><h1>Voluna</h1></div>
        <div class="content">
{content}
        </div>
        <div class="footer">Voluna &bull; Connecting volunteers with their community</div>
    </div>
</body>
</html>
"""


def _detail_rows(details: list[tuple[str, Any]]) -> str:
    html = ""
    for label, value in details:
        if value in (None, "", 0, 0.0):
            continue
        html += f"""
            <div class="detail-label">{escape(label)}</div>
            <div class="detail-value">{escape(str(value))}</div>
"""
    return html


def _detail_lines(details: list[tuple[str, Any]]) -> str:
    return "".join(
        f"{label}: {value}\n"
        for label, value in details
        if value not in (None, "", 0, 0.0)
    )


def _prepare_signups(
    signups: list[Signup] | list[SeniorProjectSignup],
    opportunity_titles: dict[str, str] | None = None,
) -> list[dict[str, str]]:
    """
    Extract and format sign-up fields for display.

    Args:
        signups: Sign-up records
        opportunity_titles: Lookup of opportunity ID to title (organization digests)

    Returns:
        List of dicts with display-ready strings
    """
    prepared = []
    for signup in signups:
        row = {
            "name": signup.name or "Unknown",
            "email": signup.email or "No email provided",
            "signup_date": format_display_date(signup.created_at),
        }
        if isinstance(signup, Signup):
            row["phone"] = signup.phone or "No phone provided"
            row["institute"] = signup.institute or "No institution provided"
            titles = opportunity_titles or {}
            row["opportunity_title"] = titles.get(
                signup.opportunity_id or "", "Unknown opportunity"
            )
        prepared.append(row)
    return prepared


def build_reminder_email(name: str | None, opportunity: Opportunity) -> EmailContent:
    """Reminder sent to a volunteer the day before an opportunity."""
    title = opportunity.title or "Volunteer opportunity"
    greeting = name or "there"
    details = [
        ("Event", title),
        ("Date & Time", format_display_time(opportunity.start_time)),
        ("Location", opportunity.location),
        ("Duration (hours)", estimate_hours(opportunity.start_time, opportunity.end_time)),
    ]

    content = f"""
            <h2 style="color: #16a34a;">Hi {escape(greeting)}!</h2>
            <div class="warning-box">
                <strong>Reminder:</strong> {escape(title)} is happening tomorrow!
            </div>
            <div class="highlight-box">
{_detail_rows(details)}
            </div>
            <p>Thank you for volunteering your time to make a difference in our community.</p>
            <p style="font-size: 14px; color: #6b7280;">
                If you need to cancel or have any questions, please contact the organization directly.
            </p>
"""

    text = f"""Hi {greeting}!

Reminder: {title} is happening tomorrow!

{_detail_lines(details)}
Thank you for volunteering your time to make a difference in our community.
If you need to cancel or have any questions, please contact the organization directly.
"""

    return EmailContent(
        subject=f"Reminder: {title} is tomorrow!",
        html=_wrap_html(content, f"Reminder: {title}"),
        text=text,
    )


def build_roll_call_email(
    opportunity: Opportunity, signup_count: int, roll_call_url: str
) -> EmailContent:
    """Prompt sent to the organizer shortly before an opportunity starts."""
    title = opportunity.title or "Volunteer opportunity"
    details = [
        ("Event", title),
        ("Start Time", format_display_time(opportunity.start_time)),
        ("Location", opportunity.location),
        ("Volunteers", f"{signup_count} signed up"),
        (
            "Duration (hours)",
            estimate_hours(opportunity.start_time, opportunity.end_time, default=None),
        ),
    ]

    content = f"""
            <h2 style="color: #16a34a;">Roll Call Time!</h2>
            <div class="warning-box">
                <strong>{escape(title)}</strong> starts in a few minutes.
                It's time to take roll call and track attendance for your volunteers.
            </div>
            <div class="highlight-box">
{_detail_rows(details)}
            </div>
            <div style="text-align: center; margin: 30px 0;">
                <a href="{escape(roll_call_url)}" class="cta-button">Take Roll Call Now</a>
            </div>
            <p style="font-size: 14px; color: #6b7280;">
                Volunteer hours are awarded to attendees you mark present. This link stays active after the event.
            </p>
"""

    text = f"""Roll Call Time!

{title} starts in a few minutes. It's time to take roll call.

{_detail_lines(details)}
Take roll call: {roll_call_url}
"""

    return EmailContent(
        subject=f"Roll Call Ready: {title} starts soon!",
        html=_wrap_html(content, f"Roll Call: {title}"),
        text=text,
    )


def _build_signup_digest(
    heading: str,
    owner_name: str,
    prepared_signups: list[dict[str, str]],
    dashboard_url: str,
) -> tuple[str, str]:
    total = len(prepared_signups)
    plural = "" if total == 1 else "s"

    html = f"""
            <h2 style="color: #16a34a;">{escape(heading)}</h2>
            <div class="highlight-box">
                <h3 style="margin-top: 0;">{escape(owner_name)} - Today's Activity</h3>
                <p><strong>{total}</strong> new volunteer sign-up{plural} today!</p>
            </div>
"""
    text = f"""{heading.upper()}
{owner_name} - Today's Activity

{total} new volunteer sign-up{plural} today:

"""

    for i, signup in enumerate(prepared_signups, 1):
        html += f"""
            <div class="signup-item">
                <strong>{escape(signup['name'])}</strong> &bull; {escape(signup['signup_date'])}<br>
                Email: {escape(signup['email'])}<br>
"""
        text += f"{i}. {signup['name']} ({signup['signup_date']})\n"
        text += f"   Email: {signup['email']}\n"

        if "phone" in signup:
            html += f"""                Phone: {escape(signup['phone'])}<br>
                Institution: {escape(signup['institute'])}<br>
                <span style="color: #16a34a; font-weight: 600;">{escape(signup['opportunity_title'])}</span>
"""
            text += f"   Phone: {signup['phone']}\n"
            text += f"   Institution: {signup['institute']}\n"
            text += f"   Opportunity: {signup['opportunity_title']}\n"

        html += """            </div>
"""
        text += "\n"

    html += f"""
            <p>
                <a href="{escape(dashboard_url)}" style="color: #16a34a; font-weight: 600;">Visit your dashboard</a>
                to manage your opportunities.
            </p>
            <p style="font-size: 14px; color: #6b7280;">This is an automated daily digest.</p>
"""
    text += f"Visit your dashboard: {dashboard_url}\n"

    return html, text


def build_organization_digest_email(
    organization: Organization,
    signups: list[Signup],
    opportunity_titles: dict[str, str],
) -> EmailContent:
    """Daily summary of new sign-ups across an organization's opportunities."""
    prepared = _prepare_signups(signups, opportunity_titles)
    dashboard_url = f"{SITE_URL}/dashboard/{organization.id or ''}"
    content, text = _build_signup_digest(
        "Volunteer Sign-ups", organization.name, prepared, dashboard_url
    )

    return EmailContent(
        subject=f"Volunteer Sign-ups - {organization.name}",
        html=_wrap_html(content, f"Sign-ups: {organization.name}"),
        text=text,
    )


def build_senior_project_digest_email(
    project: SeniorProject, signups: list[SeniorProjectSignup]
) -> EmailContent:
    """Daily summary of new sign-ups for a senior project."""
    prepared = _prepare_signups(signups)
    content, text = _build_signup_digest(
        "Senior Project Sign-ups", project.title, prepared, f"{SITE_URL}/dashboard"
    )

    return EmailContent(
        subject=f"Senior Project Sign-ups - {project.title}",
        html=_wrap_html(content, f"Sign-ups: {project.title}"),
        text=text,
    )
