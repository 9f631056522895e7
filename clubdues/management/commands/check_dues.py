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

import logging
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from clubdues.accounting.ledger import DuesLedger
from clubdues.models.accounting import MonthlyDues
from clubdues.models.member import BillingModel, Member
from clubdues.utils.common import validate_month
from clubdues.utils.exceptions import DuesValidationError, InvariantViolationError

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Django management command auditing the dues ledger.

    Checks every live monthly dues record against its linked transactions,
    and the paid attendance flags of single members against their paid
    counts. Nothing is corrected: violations are reported so that they can
    be investigated.
    """

    help = "Check that monthly dues reconcile with ledger transactions and attendance flags"

    def add_arguments(self, parser):
        parser.add_argument("--month", help="Restrict the audit to one month (YYYY-MM)")

    def handle(self, *args: Any, **options: Any) -> None:
        month = options.get("month")
        if month:
            try:
                month = validate_month(month)
            except DuesValidationError as err:
                raise CommandError(err.msg) from err

        violations = self.check_records(month)
        if month:
            violations += self.check_unrecorded_flags(month)

        if violations:
            logger.warning("Dues audit found %s inconsistencies (month %s)", violations, month or "all")
            raise CommandError(f"Found {violations} dues inconsistencies")

        self.stdout.write(self.style.SUCCESS("Dues ledger is consistent."))

    def check_records(self, month: str | None) -> int:
        """Check every live dues record, optionally restricted to one month.

        Returns:
            int: Number of records failing a check
        """
        ledger = DuesLedger()
        records = MonthlyDues.objects.select_related("member").order_by("month", "id")
        if month:
            records = records.filter(month=month)

        violations = 0
        checked = 0
        for record in records:
            checked += 1
            try:
                ledger.check_record(record)
                ledger.check_paid_flags(record.member, record.month, record)
            except InvariantViolationError as err:  # noqa: PERF203 - audit must continue on every record
                violations += 1
                self.stdout.write(self.style.ERROR(str(err)))

        self.stdout.write(f"Checked {checked} dues records.")
        return violations

    def check_unrecorded_flags(self, month: str) -> int:
        """Find single members with paid flags but no dues record in the month."""
        ledger = DuesLedger()
        violations = 0
        for member in Member.objects.filter(billing=BillingModel.SINGLE).order_by("id"):
            if ledger.get_monthly_record(member, month):
                continue
            try:
                ledger.check_paid_flags(member, month, None)
            except InvariantViolationError as err:  # noqa: PERF203 - audit must continue on every member
                violations += 1
                self.stdout.write(self.style.ERROR(str(err)))
        return violations
