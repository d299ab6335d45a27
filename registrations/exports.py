"""
Excel export of accepted registrations.

Two workbooks are kept: one for solo events and one for group events, where
every member gets their own row. The database stays the source of truth; these
files are a convenience for the organising team.
"""
import logging
import threading
from pathlib import Path

from django.conf import settings
from django.utils import timezone
from openpyxl import Workbook, load_workbook

logger = logging.getLogger(__name__)

SHEET_TITLE = 'Registrations'

# openpyxl workbooks are rewritten whole on every save
_write_lock = threading.Lock()


def _common_columns(registration):
    return {
        'College': registration.college,
        'Department': registration.department,
        'Year': registration.year,
        'Email': registration.email,
        'Phone': registration.phone,
        'Transaction_ID': registration.transaction_id,
        'Amount': float(registration.amount),
        'Payment_Method': registration.payment_method,
    }


def build_export_rows(registration):
    """
    Return the rows (dicts keyed by column header) for one registration.
    Group registrations yield one row per member.
    """
    created = timezone.localtime(registration.created_at or timezone.now())
    date = created.strftime('%Y-%m-%d %H:%M:%S')

    if not registration.is_group:
        row = {
            'Unique_ID': registration.unique_id or '',
            'Event': registration.event,
            'Name': registration.name,
            'USN': registration.usn,
        }
        row.update(_common_columns(registration))
        row['Date'] = date
        return [row]

    rows = []
    for member in registration.members.all():
        row = {
            'Unique_ID': registration.unique_id or '',
            'Event': registration.event,
            'Group_Name': registration.name,
            'Member_Name': member.name,
            'Member_USN': member.usn,
        }
        row.update(_common_columns(registration))
        row['Date'] = date
        rows.append(row)
    return rows


def export_path_for(registration):
    return Path(settings.GROUP_EXPORT_PATH if registration.is_group else settings.SOLO_EXPORT_PATH)


def append_rows(file_path, rows):
    """
    Append rows to the first sheet of an .xlsx file.
    A new file gets a header row built from the keys of the first row, frozen in place.
    Values are written in the existing header's column order.
    """
    if not rows:
        return
    file_path = Path(file_path)

    with _write_lock:
        if file_path.exists():
            workbook = load_workbook(file_path)
            worksheet = workbook.worksheets[0]
            headers = [cell.value for cell in worksheet[1]]
        else:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            workbook = Workbook()
            worksheet = workbook.active
            worksheet.title = SHEET_TITLE
            headers = list(rows[0].keys())
            worksheet.append(headers)

        for row in rows:
            worksheet.append([row.get(header, '') for header in headers])

        worksheet.freeze_panes = 'A2'
        workbook.save(file_path)


def append_registration_rows(registration):
    """
    Write one registration to its export workbook. Errors propagate to the caller
    (the follow-up task runner records them).
    """
    rows = build_export_rows(registration)
    file_path = export_path_for(registration)
    append_rows(file_path, rows)
    logger.info(f"Exported {len(rows)} row(s) for {registration.unique_id} ({registration.event}) to {file_path.name}")
    return len(rows)
