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

"""Result payloads of the dues operations.

Results are plain dicts so that views can return them as JSON unchanged.
``changed`` is False when there was nothing to do: a normal outcome,
distinct from a rejected request, which raises instead.
"""


def payment_result(
    changed: bool,
    posted_count: int = 0,
    posted_amount: int = 0,
    new_total: int = 0,
    transaction_id: int | None = None,
) -> dict:
    """Build the outcome of a mark-paid operation.

    Args:
        changed: Whether anything was posted or flagged
        posted_count: Events covered by the new transaction
        posted_amount: Amount posted in minor currency units
        new_total: Total paid for the month after the operation
        transaction_id: Primary key of the posted transaction, if any

    Returns:
        dict: The result payload
    """
    return {
        "changed": changed,
        "posted_count": posted_count,
        "posted_amount": posted_amount,
        "new_total": new_total,
        "transaction_id": transaction_id,
    }


def reversal_result(
    changed: bool,
    reversed_count: int = 0,
    reversed_amount: int = 0,
    new_total: int = 0,
    reopened: int = 0,
) -> dict:
    """Build the outcome of a cancel-payment operation."""
    return {
        "changed": changed,
        "reversed_count": reversed_count,
        "reversed_amount": reversed_amount,
        "new_total": new_total,
        "reopened": reopened,
    }
