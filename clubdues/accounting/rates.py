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

"""Billing rate resolution for monthly dues.

Pure functions: given a billing model and the relevant counts they return
what a member owes, without touching the database.
"""

from django.conf import settings as conf_settings

from clubdues.models.event import EventType
from clubdues.models.member import BillingModel

DEFAULT_FIXED_UNIT_FEE = 180

DEFAULT_SINGLE_UNIT_FEE = 220

DEFAULT_QUALIFYING_EVENT_TYPES = (EventType.GENERAL, EventType.CLOSED, EventType.JOINT)


def get_unit_fee(billing: str) -> int:
    """Return the per-event fee for a billing model.

    Args:
        billing: BillingModel value of the member

    Returns:
        int: Fee in minor currency units

    Raises:
        ValueError: If the billing model is unknown
    """
    if billing == BillingModel.FIXED:
        return getattr(conf_settings, "DUES_FIXED_UNIT_FEE", DEFAULT_FIXED_UNIT_FEE)
    if billing == BillingModel.SINGLE:
        return getattr(conf_settings, "DUES_SINGLE_UNIT_FEE", DEFAULT_SINGLE_UNIT_FEE)
    msg = f"Unknown billing model: {billing}"
    raise ValueError(msg)


def get_qualifying_event_types() -> list[str]:
    """Return the event types that bear monthly dues."""
    return list(getattr(conf_settings, "DUES_QUALIFYING_EVENT_TYPES", DEFAULT_QUALIFYING_EVENT_TYPES))


def is_qualifying(event_type: str) -> bool:
    return event_type in get_qualifying_event_types()


def resolve_event_fee(billing: str, event_type: str) -> int:
    """Return the fee a single event contributes to the monthly dues.

    Non-qualifying events are billed and settled on their own, so they
    contribute nothing here.
    """
    if not is_qualifying(event_type):
        return 0
    return get_unit_fee(billing)


def resolve_amount_owed(billing: str, scheduled_events: int, member_registrations: int) -> int:
    """Return the dues owed for one month.

    Fixed members owe a flat due for every qualifying event scheduled in the
    month, whether they attended or not. Single members owe for each of their
    own qualifying registrations.

    Args:
        billing: BillingModel value of the member
        scheduled_events: Qualifying events scheduled in the month
        member_registrations: Active qualifying registrations of the member in the month

    Returns:
        int: Amount owed in minor currency units, zero when there is nothing to bill
    """
    unit_fee = get_unit_fee(billing)
    if billing == BillingModel.FIXED:
        return unit_fee * max(scheduled_events, 0)
    return unit_fee * max(member_registrations, 0)
