"""Alert email rendering for sync failures.

Pure functions of a SyncLogEntry: no clock, no database. Every interpolated
value is HTML-escaped.
"""
from datetime import datetime
from html import escape
from typing import Optional

from ..schemas.sync_log import SyncLogEntry

UNKNOWN = "Unknown"

# status -> (banner color, label)
STATUS_STYLES = {
    "error": ("#dc2626", "FAILED"),
    "stale": ("#f59e0b", "STALE"),
}


def format_timestamp(value: Optional[datetime]) -> str:
    """Format a UTC timestamp for humans."""
    if value is None:
        return UNKNOWN
    return value.strftime("%Y-%m-%d %H:%M:%S UTC")


def build_alert_subject(entry: SyncLogEntry) -> str:
    """Build the alert email subject line."""
    origin = entry.origin_module or entry.module_name
    target = entry.target_module or UNKNOWN
    return f"[Alert] Sync Failed: {origin} → {target}"


def _row(label: str, value) -> str:
    return (
        '<tr>'
        f'<td style="padding: 6px 12px; color: #6b7280;">{escape(label)}</td>'
        f'<td style="padding: 6px 12px;"><strong>{escape(str(value))}</strong></td>'
        '</tr>'
    )


def render_alert_html(entry: SyncLogEntry) -> str:
    """Render the alert email body for one failed or stale sync."""
    color, label = STATUS_STYLES.get(entry.status, STATUS_STYLES["error"])

    rows = [
        _row("Module", entry.module_name),
        _row("Origin", entry.origin_module or UNKNOWN),
        _row("Target", entry.target_module or UNKNOWN),
        _row("Last Sync", format_timestamp(entry.last_synced_at)),
        _row("Retry Count", entry.retry_count),
        _row("Records Processed", entry.records_processed),
    ]
    if entry.sync_duration_ms is not None:
        rows.append(_row("Sync Duration", f"{entry.sync_duration_ms} ms"))
    rows.append(_row("Logged At", format_timestamp(entry.created_at)))
    rows.append(_row("Log ID", entry.id))

    error_block = ""
    if entry.status == "error" and entry.error_message:
        error_block = (
            '<div style="background: #fef2f2; border-left: 4px solid #dc2626; padding: 15px; margin: 20px 0;">'
            '<p style="margin-top: 0;"><strong>Error Message:</strong></p>'
            '<pre style="white-space: pre-wrap; margin: 0;">'
            f'<code>{escape(entry.error_message)}</code>'
            '</pre>'
            '</div>'
        )

    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<div style="background: {color}; color: white; padding: 20px; text-align: center;">'
        f'<h1 style="margin: 0;">DataBridge Sync {label}</h1>'
        '</div>'
        '<div style="padding: 30px; background: #f9fafb;">'
        '<div style="background: white; padding: 20px; border-radius: 8px;">'
        f'<h2 style="color: {color}; margin-top: 0;">{escape(entry.module_name)}</h2>'
        f'<table style="border-collapse: collapse; width: 100%;">{"".join(rows)}</table>'
        f'{error_block}'
        '</div>'
        '</div>'
        '<div style="text-align: center; padding: 20px; color: #6b7280; font-size: 14px;">'
        '<p>DataBridge Monitoring - automated sync failure alert</p>'
        '</div>'
        '</div>'
    )
