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

from typing import ClassVar

from admin_auto_filters.filters import AutocompleteFilter
from import_export.admin import ImportExportModelAdmin


class DefModelAdmin(ImportExportModelAdmin):
    """Base admin class for club models, with import/export and newest rows first."""

    ordering: ClassVar[list] = ["-updated"]


class EventFilter(AutocompleteFilter):
    """Filter for events."""

    title = "Event"
    field_name = "event"


class MemberFilter(AutocompleteFilter):
    """Filter for members."""

    title = "Member"
    field_name = "member"


class DuesFilter(AutocompleteFilter):
    """Filter for monthly dues records."""

    title = "Dues"
    field_name = "dues"
