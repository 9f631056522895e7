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

"""Tests for posting monthly dues payments"""

import pytest

from clubdues.accounting.payment import mark_paid, mark_paid_fixed, mark_paid_single
from clubdues.models.accounting import LedgerTransaction, MonthlyDues
from clubdues.models.event import EventType
from clubdues.models.registration import RegistrationStatus
from clubdues.tests.unit.base import MONTH, BaseTestCase
from clubdues.utils.exceptions import DuesValidationError, InvariantViolationError


@pytest.mark.django_db
class TestMarkPaidFixed(BaseTestCase):
    def test_posts_flat_due_for_scheduled_events(self):
        member = self.fixed_member()
        events = self.create_events([4, 11, 18, 25])
        # attended only two of the four meetings
        self.register(member, events[:2])

        result = mark_paid_fixed(member.id, MONTH)

        assert result["changed"]
        assert result["posted_amount"] == 720
        assert result["posted_count"] == 4
        assert result["new_total"] == 720
        record = self.record(member)
        assert record.total_paid == 720
        assert record.paid_count == 4
        assert record.paid
        assert self.dues_transactions(member).count() == 1
        assert self.paid_flags(member) == [True, True]

    def test_all_registrations_flagged(self):
        member = self.fixed_member()
        self.register(member, self.create_events([4, 11, 18, 25]))

        mark_paid_fixed(member.id, MONTH)

        assert self.paid_flags(member) == [True, True, True, True]

    def test_non_qualifying_registrations_untouched(self):
        member = self.fixed_member()
        meeting = self.create_event(4)
        dinner = self.create_event(6, EventType.DINNER)
        self.register(member, [meeting, dinner])

        result = mark_paid_fixed(member.id, MONTH)

        assert result["posted_amount"] == 180
        assert self.paid_flags(member) == [True, False]

    def test_resubmission_posts_once(self):
        member = self.fixed_member()
        self.register(member, self.create_events([4, 11, 18, 25]))

        first = mark_paid_fixed(member.id, MONTH)
        second = mark_paid_fixed(member.id, MONTH)

        assert first["changed"]
        assert not second["changed"]
        assert second["new_total"] == 720
        assert self.dues_transactions(member).count() == 1
        assert self.record(member).total_paid == 720

    def test_resubmission_flags_new_registrations(self):
        member = self.fixed_member()
        events = self.create_events([4, 11])
        self.register(member, events[:1])
        mark_paid_fixed(member.id, MONTH)

        self.register(member, events[1:])
        result = mark_paid_fixed(member.id, MONTH)

        assert result["changed"]
        assert result["posted_amount"] == 0
        assert self.dues_transactions(member).count() == 1
        assert self.paid_flags(member) == [True, True]

    def test_event_added_after_payment_posts_difference(self):
        member = self.fixed_member()
        self.create_events([4, 11])
        mark_paid_fixed(member.id, MONTH)

        self.create_event(18)
        result = mark_paid_fixed(member.id, MONTH)

        assert result["posted_amount"] == 180
        assert result["posted_count"] == 1
        assert result["new_total"] == 540
        record = self.record(member)
        assert record.paid_count == 3
        assert self.dues_transactions(member).count() == 2

    def test_no_events_is_noop(self):
        member = self.fixed_member()

        result = mark_paid_fixed(member.id, MONTH)

        assert not result["changed"]
        assert self.record(member) is None
        assert not LedgerTransaction.objects.exists()

    def test_single_member_rejected(self):
        member = self.single_member()
        self.create_events([4])

        with pytest.raises(DuesValidationError, match="not billed with the fixed model"):
            mark_paid_fixed(member.id, MONTH)

    def test_missing_identifiers(self):
        member = self.fixed_member()

        with pytest.raises(DuesValidationError, match="Member is required"):
            mark_paid_fixed(None, MONTH)
        with pytest.raises(DuesValidationError, match="Month is required"):
            mark_paid_fixed(member.id, "")


@pytest.mark.django_db
class TestMarkPaidSingle(BaseTestCase):
    def test_clamped_to_qualifying_events(self):
        member = self.single_member()
        self.register(member, self.create_events([4, 11, 18]))

        result = mark_paid_single(member.id, MONTH, 5)

        assert result["changed"]
        assert result["posted_count"] == 3
        assert result["posted_amount"] == 660
        assert result["new_total"] == 660
        assert self.paid_flags(member) == [True, True, True]
        record = self.record(member)
        assert record.total_paid == 660
        assert record.paid_count == 3

    def test_earliest_events_paid_first(self):
        member = self.single_member()
        late, early, middle = self.create_event(25), self.create_event(2), self.create_event(14)
        self.register(member, [late, early, middle])

        mark_paid_single(member.id, MONTH, 1)
        assert self.paid_flags(member) == [True, False, False]

        mark_paid_single(member.id, MONTH, 1)
        assert self.paid_flags(member) == [True, True, False]

    def test_partial_payments_accumulate(self):
        member = self.single_member()
        self.register(member, self.create_events([4, 11, 18, 25]))

        first = mark_paid_single(member.id, MONTH, 1)
        second = mark_paid_single(member.id, MONTH, 2)

        assert first["new_total"] == 220
        assert second["posted_amount"] == 440
        assert second["new_total"] == 660
        assert self.dues_transactions(member).count() == 2
        assert self.record(member).paid_count == 3
        assert self.paid_flags(member) == [True, True, True, False]

    def test_clamped_after_partial_payment(self):
        member = self.single_member()
        self.register(member, self.create_events([4, 11, 18]))
        mark_paid_single(member.id, MONTH, 2)

        result = mark_paid_single(member.id, MONTH, 10)

        assert result["posted_count"] == 1
        assert result["posted_amount"] == 220
        assert result["new_total"] == 660

    def test_fully_paid_is_noop(self):
        member = self.single_member()
        self.register(member, self.create_events([4, 11]))
        mark_paid_single(member.id, MONTH, 2)

        result = mark_paid_single(member.id, MONTH, 1)

        assert not result["changed"]
        assert result["new_total"] == 440
        assert self.dues_transactions(member).count() == 1

    def test_zero_count_is_noop(self):
        member = self.single_member()
        self.register(member, self.create_events([4]))

        result = mark_paid_single(member.id, MONTH, 0)

        assert not result["changed"]
        assert self.record(member) is None

    def test_no_attendance_is_noop(self):
        member = self.single_member()
        self.create_events([4, 11])

        result = mark_paid_single(member.id, MONTH, 2)

        assert not result["changed"]
        assert not MonthlyDues.objects.exists()

    def test_cancelled_registrations_not_billed(self):
        member = self.single_member()
        events = self.create_events([4, 11])
        self.register(member, events[:1])
        self.register(member, events[1:], status=RegistrationStatus.CANCELLED)

        result = mark_paid_single(member.id, MONTH, 2)

        assert result["posted_count"] == 1
        assert self.paid_flags(member) == [True, False]

    def test_pay_after_paid_registration_cancelled(self):
        member = self.single_member()
        registrations = self.register(member, self.create_events([4, 11, 18, 25]))
        mark_paid_single(member.id, MONTH, 2)
        registrations[0].status = RegistrationStatus.CANCELLED
        registrations[0].save()

        result = mark_paid_single(member.id, MONTH, 1)

        assert result["changed"]
        assert result["posted_count"] == 1
        assert result["new_total"] == 660
        assert self.record(member).paid_count == 3
        # the cancelled registration keeps its flag, the next active one is paid
        assert self.paid_flags(member) == [True, True, True, False]

    def test_clamp_ignores_cancelled_paid_registration(self):
        member = self.single_member()
        registrations = self.register(member, self.create_events([4, 11, 18]))
        mark_paid_single(member.id, MONTH, 1)
        registrations[0].status = RegistrationStatus.CANCELLED
        registrations[0].save()

        result = mark_paid_single(member.id, MONTH, 5)

        assert result["posted_count"] == 2
        assert self.paid_flags(member) == [True, True, True]

    def test_count_from_form_string(self):
        member = self.single_member()
        self.register(member, self.create_events([4, 11]))

        result = mark_paid_single(str(member.id), MONTH, "2")

        assert result["posted_count"] == 2

    @pytest.mark.parametrize("count", [None, ""])
    def test_count_required(self, count):
        member = self.single_member()

        with pytest.raises(DuesValidationError, match="Count is required"):
            mark_paid_single(member.id, MONTH, count)

    @pytest.mark.parametrize("count", [-1, "-2", "two", 1.5, True])
    def test_invalid_count(self, count):
        member = self.single_member()
        self.register(member, self.create_events([4]))

        with pytest.raises(DuesValidationError):
            mark_paid_single(member.id, MONTH, count)
        assert self.record(member) is None

    def test_fixed_member_rejected(self):
        member = self.fixed_member()

        with pytest.raises(DuesValidationError, match="not billed with the single model"):
            mark_paid_single(member.id, MONTH, 1)

    def test_invariant_violation_aborts(self):
        member = self.single_member()
        self.register(member, self.create_events([4, 11, 18]))
        mark_paid_single(member.id, MONTH, 1)
        MonthlyDues.objects.filter(member=member).update(total_paid=1000)

        with pytest.raises(InvariantViolationError):
            mark_paid_single(member.id, MONTH, 1)

        assert self.dues_transactions(member).count() == 1
        assert self.paid_flags(member) == [True, False, False]

    def test_flag_mismatch_aborts(self):
        member = self.single_member()
        registrations = self.register(member, self.create_events([4, 11]))
        registrations[1].fee_paid = True
        registrations[1].save()

        with pytest.raises(InvariantViolationError, match="paid flags"):
            mark_paid_single(member.id, MONTH, 1)

        assert self.record(member) is None


@pytest.mark.django_db
class TestMarkPaid(BaseTestCase):
    def test_dispatch_fixed_ignores_count(self):
        member = self.fixed_member()
        self.create_events([4, 11])

        result = mark_paid(member.id, MONTH, count=1)

        assert result["posted_amount"] == 360

    def test_dispatch_single(self):
        member = self.single_member()
        self.register(member, self.create_events([4, 11]))

        result = mark_paid(member.id, MONTH, count=1)

        assert result["posted_amount"] == 220

    def test_logged_after_commit(self, caplog, django_capture_on_commit_callbacks):
        member = self.single_member()
        self.register(member, self.create_events([4]))

        with caplog.at_level("INFO", logger="clubdues"):
            with django_capture_on_commit_callbacks(execute=True):
                mark_paid(member.id, MONTH, count=1)

        assert "Posted single dues" in caplog.text
