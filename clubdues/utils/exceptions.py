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

class DuesValidationError(Exception):
    """Exception raised when a dues operation receives invalid input.

    Raised before any mutation takes place, so the ledger is untouched.

    Attributes:
        msg (str): Human readable reason, returned to the caller as is
    """

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg


class InvariantViolationError(Exception):
    """Exception raised when ledger state does not reconcile.

    Covers a monthly dues total that differs from the sum of its linked
    transactions, a paid count that differs from the number of paid
    attendance flags, and a dues record marked paid with no transactions.
    Raised inside the unit of work so that the enclosing database
    transaction is rolled back.

    Attributes:
        record_id (int): MonthlyDues primary key, or None if the record is gone
        detail (str): Description of the mismatch
    """

    def __init__(self, record_id: int | None, detail: str) -> None:
        """Initialize with the offending record id and the mismatch description."""
        super().__init__(f"Dues record {record_id}: {detail}")
        self.record_id = record_id
        self.detail = detail


class LedgerProtectedError(Exception):
    """Exception raised when deleting a transaction that backs a dues record."""

    pass
