import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Member",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("deleted", models.DateTimeField(db_index=True, editable=False, null=True)),
                ("deleted_by_cascade", models.BooleanField(default=False, editable=False)),
                ("created", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated", models.DateTimeField(auto_now=True)),
                ("search", models.CharField(editable=False, max_length=200)),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("surname", models.CharField(blank=True, max_length=100, verbose_name="Surname")),
                (
                    "nickname",
                    models.CharField(
                        blank=True,
                        help_text="Optional - Shown instead of name and surname in payment reminders",
                        max_length=100,
                        verbose_name="Nickname",
                    ),
                ),
                ("email", models.CharField(blank=True, max_length=200)),
                (
                    "billing",
                    models.CharField(
                        choices=[("f", "Fixed"), ("s", "Single")],
                        db_index=True,
                        default="s",
                        help_text="Fixed members pay a flat monthly due, single members pay for each event attended",
                        max_length=1,
                        verbose_name="Billing",
                    ),
                ),
                (
                    "user",
                    models.OneToOneField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="member",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["created"],
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("deleted", models.DateTimeField(db_index=True, editable=False, null=True)),
                ("deleted_by_cascade", models.BooleanField(default=False, editable=False)),
                ("created", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=150, verbose_name="Name")),
                (
                    "typ",
                    models.CharField(
                        choices=[
                            ("g", "General meeting"),
                            ("c", "Closed meeting"),
                            ("j", "Joint meeting"),
                            ("b", "Board meeting"),
                            ("d", "Dinner"),
                            ("s", "Soft activity"),
                        ],
                        db_index=True,
                        default="g",
                        max_length=1,
                        verbose_name="Type",
                    ),
                ),
                ("start", models.DateTimeField(db_index=True, verbose_name="Start")),
                ("location", models.CharField(blank=True, max_length=300, verbose_name="Location")),
            ],
            options={
                "ordering": ["start"],
            },
        ),
        migrations.CreateModel(
            name="FinanceCategory",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("deleted", models.DateTimeField(db_index=True, editable=False, null=True)),
                ("deleted_by_cascade", models.BooleanField(default=False, editable=False)),
                ("created", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=100, verbose_name="Name")),
                ("direction", models.CharField(choices=[("i", "Income"), ("e", "Expense")], max_length=1)),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("name", "direction", "deleted"),
                        name="unique_category_with_optional",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("deleted", None)),
                        fields=("name", "direction"),
                        name="unique_category_without_optional",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Registration",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("deleted", models.DateTimeField(db_index=True, editable=False, null=True)),
                ("deleted_by_cascade", models.BooleanField(default=False, editable=False)),
                ("created", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated", models.DateTimeField(auto_now=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("a", "Active"), ("c", "Cancelled")],
                        db_index=True,
                        default="a",
                        max_length=1,
                    ),
                ),
                ("fee_paid", models.BooleanField(default=False, verbose_name="Fee paid")),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="clubdues.event",
                    ),
                ),
                (
                    "member",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registrations",
                        to="clubdues.member",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("member", "event", "deleted"),
                        name="unique_registration_with_optional",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("deleted", None)),
                        fields=("member", "event"),
                        name="unique_registration_without_optional",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="MonthlyDues",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("deleted", models.DateTimeField(db_index=True, editable=False, null=True)),
                ("deleted_by_cascade", models.BooleanField(default=False, editable=False)),
                ("created", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated", models.DateTimeField(auto_now=True)),
                ("search", models.CharField(editable=False, max_length=200)),
                ("month", models.CharField(db_index=True, help_text="YYYY-MM", max_length=7)),
                ("total_paid", models.IntegerField(default=0)),
                ("paid_count", models.IntegerField(default=0)),
                ("paid", models.BooleanField(default=False)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                (
                    "member",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="monthly_dues",
                        to="clubdues.member",
                    ),
                ),
            ],
            options={
                "constraints": [
                    models.UniqueConstraint(
                        fields=("member", "month", "deleted"),
                        name="unique_dues_with_optional",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("deleted", None)),
                        fields=("member", "month"),
                        name="unique_dues_without_optional",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerTransaction",
            fields=[
                ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("deleted", models.DateTimeField(db_index=True, editable=False, null=True)),
                ("deleted_by_cascade", models.BooleanField(default=False, editable=False)),
                ("created", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated", models.DateTimeField(auto_now=True)),
                ("search", models.CharField(editable=False, max_length=200)),
                ("date", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "direction",
                    models.CharField(choices=[("i", "Income"), ("e", "Expense")], default="i", max_length=1),
                ),
                ("amount", models.IntegerField(help_text="Amount in minor currency units")),
                ("covered", models.IntegerField(default=0)),
                ("counterparty", models.CharField(blank=True, max_length=200)),
                ("note", models.CharField(blank=True, max_length=500)),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="clubdues.financecategory",
                    ),
                ),
                (
                    "dues",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="clubdues.monthlydues",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="transactions",
                        to="clubdues.event",
                    ),
                ),
            ],
            options={
                "ordering": ["date", "id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", 0)),
                        name="ledger_transaction_positive_amount",
                    ),
                ],
            },
        ),
    ]
