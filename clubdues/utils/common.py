# ClubDues - monthly dues and attendance ledger
# Copyright (C) 2025 Scanagatta Mauro
#
# This file is part of ClubDues and is dual-licensed:
#
# 1. Under the terms of the GNU Affero General Public License (AGPL) version 3,
#    as published by the Free Software Foundation. You may use, modify, and
#    distribute this file under those terms.
#
# 2. Under a commercial license, allowing use in closed-source or proprietary
#    environments without the obligations of the AGPL.
#
# If you have obtained this file under the AGPL, and you make it available over
# a network, you must also make the complete source code available under the same license.
#
# For more information or to purchase a commercial license, contact:
# commercial@larpmanager.com
#
# SPDX-License-Identifier: AGPL-3.0-or-later OR Proprietary

import re
from datetime import datetime

from dateutil.relativedelta import relativedelta
from django.conf import settings as conf_settings
from django.utils import timezone

from clubdues.utils.exceptions import DuesValidationError

MONTH_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def validate_month(month: str | None) -> str:
    """Validate a calendar month identifier.

    Args:
        month: Month in "YYYY-MM" format

    Returns:
        str: The month, stripped of surrounding whitespace

    Raises:
        DuesValidationError: If the month is missing or malformed
    """
    if not month:
        raise DuesValidationError("Month is required")

    month = str(month).strip()
    if not MONTH_PATTERN.match(month):
        raise DuesValidationError(f"Invalid month '{month}', expected YYYY-MM")

    return month


def get_month_range(month: str) -> tuple[datetime, datetime]:
    """Return the half-open datetime interval [start, end) covering a month.

    Boundaries follow the USE_TZ setting, so they can be compared directly
    with event start datetimes.
    """
    month = validate_month(month)
    start = datetime.strptime(f"{month}-01", "%Y-%m-%d")
    end = start + relativedelta(months=1)

    if not conf_settings.USE_TZ:
        return start, end

    current_timezone = timezone.get_current_timezone()
    return timezone.make_aware(start, current_timezone), timezone.make_aware(end, current_timezone)


def current_month() -> str:
    """Return the current month as "YYYY-MM"."""
    if conf_settings.USE_TZ:
        return timezone.localtime().strftime("%Y-%m")
    return datetime.now().strftime("%Y-%m")


def format_month_label(month: str) -> str:
    """Return the two digit month number used in reminder messages."""
    return validate_month(month)[5:7]
