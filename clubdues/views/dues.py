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

from django.contrib.auth.decorators import login_required, permission_required
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from clubdues.accounting.export import export_ledger_csv
from clubdues.accounting.ledger import delete_transaction, record_transaction
from clubdues.accounting.payment import mark_paid_fixed, mark_paid_single
from clubdues.accounting.reporting import fixed_reminder_text, get_monthly_summary, single_reminder_text
from clubdues.accounting.reversal import cancel_fixed_payment, cancel_last_single_payment
from clubdues.utils.common import current_month, validate_month
from clubdues.utils.exceptions import DuesValidationError, LedgerProtectedError

logger = logging.getLogger(__name__)

FINANCE_PERMISSION = "clubdues.change_monthlydues"


def _error(msg: str) -> JsonResponse:
    """Return a JSON error response."""
    return JsonResponse({"res": "ko", "msg": msg}, status=400)


def _ok(data: dict) -> JsonResponse:
    return JsonResponse({"res": "ok", **data})


@login_required
@permission_required(FINANCE_PERMISSION, raise_exception=True)
@require_POST
def dues_pay_fixed(request: HttpRequest) -> JsonResponse:
    """Mark the monthly dues of a fixed member as paid.

    Expects ``member_id`` and ``month`` in the POST data.
    """
    try:
        result = mark_paid_fixed(request.POST.get("member_id"), request.POST.get("month"))
    except DuesValidationError as err:
        return _error(err.msg)
    return _ok(result)


@login_required
@permission_required(FINANCE_PERMISSION, raise_exception=True)
@require_POST
def dues_pay_single(request: HttpRequest) -> JsonResponse:
    """Pay some of the qualifying events of a single member.

    Expects ``member_id``, ``month`` and ``count`` in the POST data; the
    response carries the count actually posted and the new monthly total.
    """
    try:
        result = mark_paid_single(
            request.POST.get("member_id"),
            request.POST.get("month"),
            request.POST.get("count"),
        )
    except DuesValidationError as err:
        return _error(err.msg)
    return _ok(result)


@login_required
@permission_required(FINANCE_PERMISSION, raise_exception=True)
@require_POST
def dues_cancel_fixed(request: HttpRequest) -> JsonResponse:
    try:
        result = cancel_fixed_payment(request.POST.get("member_id"), request.POST.get("month"))
    except DuesValidationError as err:
        return _error(err.msg)
    return _ok(result)


@login_required
@permission_required(FINANCE_PERMISSION, raise_exception=True)
@require_POST
def dues_cancel_single(request: HttpRequest) -> JsonResponse:
    try:
        result = cancel_last_single_payment(request.POST.get("member_id"), request.POST.get("month"))
    except DuesValidationError as err:
        return _error(err.msg)
    return _ok(result)


@login_required
@permission_required(FINANCE_PERMISSION, raise_exception=True)
@require_GET
def dues_summary(request: HttpRequest) -> JsonResponse:
    month = request.GET.get("month") or current_month()
    try:
        summary = get_monthly_summary(request.GET.get("member_id"), month)
    except DuesValidationError as err:
        return _error(err.msg)
    return _ok(summary)


@login_required
@permission_required(FINANCE_PERMISSION, raise_exception=True)
@require_GET
def dues_reminders(request: HttpRequest) -> JsonResponse:
    """Return the payment reminder messages for fixed and single members."""
    try:
        month = validate_month(request.GET.get("month") or current_month())
    except DuesValidationError as err:
        return _error(err.msg)
    return _ok({"month": month, "fixed": fixed_reminder_text(month), "single": single_reminder_text(month)})


@login_required
@permission_required(FINANCE_PERMISSION, raise_exception=True)
@require_GET
def ledger_export(request: HttpRequest) -> HttpResponse:
    """Download the ledger of a month as CSV."""
    try:
        month = validate_month(request.GET.get("month") or current_month())
    except DuesValidationError as err:
        return _error(err.msg)

    response = HttpResponse(export_ledger_csv(month, request.GET.get("direction")), content_type="text/csv")
    response["Content-Disposition"] = f'attachment; filename="ledger-{month}.csv"'
    return response


@login_required
@permission_required(FINANCE_PERMISSION, raise_exception=True)
@require_POST
def ledger_add(request: HttpRequest) -> JsonResponse:
    """Record a manual income or expense entry.

    Expects ``direction``, ``amount`` (minor units), ``category`` and optionally
    ``counterparty`` and ``note`` in the POST data.
    """
    try:
        amount = int(request.POST.get("amount", ""))
    except ValueError:
        return _error("Amount must be a positive integer")

    try:
        ledger_transaction = record_transaction(
            request.POST.get("direction", ""),
            amount,
            request.POST.get("category", ""),
            counterparty=request.POST.get("counterparty", ""),
            note=request.POST.get("note", ""),
        )
    except DuesValidationError as err:
        return _error(err.msg)
    return _ok({"id": ledger_transaction.id})


@login_required
@permission_required(FINANCE_PERMISSION, raise_exception=True)
@require_POST
def ledger_delete(request: HttpRequest, num: int) -> JsonResponse:
    try:
        deleted = delete_transaction(num)
    except LedgerProtectedError as err:
        logger.warning("Refused ledger deletion: %s", err)
        return _error(str(err))
    return _ok({"deleted": deleted})
