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

"""Tests for the dues and ledger endpoints"""

import pytest
from django.contrib.auth.models import User
from django.urls import reverse

from clubdues.accounting.payment import mark_paid_single
from clubdues.models.accounting import LedgerTransaction, TransactionDirection
from clubdues.tests.unit.base import MONTH, BaseTestCase


@pytest.mark.django_db
class TestDuesViews(BaseTestCase):
    def test_pay_single(self, treasurer_client):
        member = self.single_member()
        self.register(member, self.create_events([4, 11, 18]))

        response = treasurer_client.post(
            reverse("dues_pay_single"), {"member_id": member.id, "month": MONTH, "count": "5"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["res"] == "ok"
        assert data["changed"]
        assert data["posted_count"] == 3
        assert data["new_total"] == 660

    def test_pay_fixed(self, treasurer_client):
        member = self.fixed_member()
        self.create_events([4, 11, 18, 25])

        response = treasurer_client.post(reverse("dues_pay_fixed"), {"member_id": member.id, "month": MONTH})

        assert response.json()["posted_amount"] == 720

    def test_nothing_to_pay_is_not_an_error(self, treasurer_client):
        member = self.fixed_member()

        response = treasurer_client.post(reverse("dues_pay_fixed"), {"member_id": member.id, "month": MONTH})

        assert response.status_code == 200
        assert response.json() == {
            "res": "ok",
            "changed": False,
            "posted_count": 0,
            "posted_amount": 0,
            "new_total": 0,
            "transaction_id": None,
        }

    def test_missing_count(self, treasurer_client):
        member = self.single_member()

        response = treasurer_client.post(reverse("dues_pay_single"), {"member_id": member.id, "month": MONTH})

        assert response.status_code == 400
        assert response.json() == {"res": "ko", "msg": "Count is required"}

    def test_missing_member(self, treasurer_client):
        response = treasurer_client.post(reverse("dues_pay_fixed"), {"month": MONTH})

        assert response.status_code == 400
        assert response.json()["msg"] == "Member is required"

    def test_cancel_single(self, treasurer_client):
        member = self.single_member()
        self.register(member, self.create_events([4, 11]))
        mark_paid_single(member.id, MONTH, 2)

        response = treasurer_client.post(reverse("dues_cancel_single"), {"member_id": member.id, "month": MONTH})

        data = response.json()
        assert data["reversed_count"] == 2
        assert data["new_total"] == 0
        assert self.paid_flags(member) == [False, False]

    def test_cancel_fixed_nothing_paid(self, treasurer_client):
        member = self.fixed_member()

        response = treasurer_client.post(reverse("dues_cancel_fixed"), {"member_id": member.id, "month": MONTH})

        assert response.status_code == 200
        assert not response.json()["changed"]

    def test_summary(self, treasurer_client):
        member = self.single_member()
        self.register(member, self.create_events([4, 11]))

        response = treasurer_client.get(reverse("dues_summary"), {"member_id": member.id, "month": MONTH})

        data = response.json()
        assert data["owed"] == 440
        assert data["outstanding"] == 440
        assert data["state"] == "no_record"

    def test_reminders(self, treasurer_client):
        member = self.single_member(name="Anna", surname="Rossi")
        self.register(member, self.create_events([4]))

        response = treasurer_client.get(reverse("dues_reminders"), {"month": MONTH})

        data = response.json()
        assert data["fixed"] == "Please pay the dues for month 03\n180 x 1 events = 180"
        assert data["single"] == "Anna Rossi  220 x 1 events = 220"

    def test_invalid_month(self, treasurer_client):
        response = treasurer_client.get(reverse("dues_reminders"), {"month": "2025-3"})

        assert response.status_code == 400

    def test_get_not_allowed_on_pay(self, treasurer_client):
        response = treasurer_client.get(reverse("dues_pay_fixed"))

        assert response.status_code == 405

    def test_permission_required(self, client):
        user = User.objects.create_user(username="guest", password="guest")
        client.force_login(user)

        response = client.post(reverse("dues_pay_fixed"), {"member_id": 1, "month": MONTH})

        assert response.status_code == 403

    def test_login_required(self, client):
        response = client.post(reverse("dues_pay_fixed"), {"member_id": 1, "month": MONTH})

        assert response.status_code == 302


@pytest.mark.django_db
class TestLedgerViews(BaseTestCase):
    def test_add_and_delete(self, treasurer_client, ledger_categories):
        response = treasurer_client.post(
            reverse("ledger_add"),
            {"direction": TransactionDirection.EXPENSE, "amount": "1500", "category": "Venue expense", "note": "Hall"},
        )
        assert response.status_code == 200
        transaction_id = response.json()["id"]
        assert LedgerTransaction.objects.get(id=transaction_id).amount == 1500

        response = treasurer_client.post(reverse("ledger_delete", args=[transaction_id]))
        assert response.json() == {"res": "ok", "deleted": True}

    def test_add_invalid_amount(self, treasurer_client, ledger_categories):
        response = treasurer_client.post(
            reverse("ledger_add"), {"direction": TransactionDirection.INCOME, "amount": "ten", "category": "Other"}
        )

        assert response.status_code == 400

    def test_delete_dues_payment_refused(self, treasurer_client):
        member = self.single_member()
        self.register(member, self.create_events([4]))
        payment = mark_paid_single(member.id, MONTH, 1)

        response = treasurer_client.post(reverse("ledger_delete", args=[payment["transaction_id"]]))

        assert response.status_code == 400
        assert LedgerTransaction.objects.filter(id=payment["transaction_id"]).exists()

    def test_export(self, treasurer_client, ledger_categories):
        treasurer_client.post(
            reverse("ledger_add"), {"direction": TransactionDirection.INCOME, "amount": "900", "category": "Other"}
        )
        month = LedgerTransaction.objects.get().date.strftime("%Y-%m")

        response = treasurer_client.get(reverse("ledger_export"), {"month": month})

        assert response["Content-Type"] == "text/csv"
        assert response["Content-Disposition"] == f'attachment; filename="ledger-{month}.csv"'
        content = response.content.decode()
        assert content.startswith("date,direction,amount,category,counterparty,note")
        assert "900" in content
