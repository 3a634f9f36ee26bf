import decimal

import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
import finance_core.models.transaction
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("username", models.CharField(error_messages={"unique": "A user with that username already exists."}, help_text="Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.", max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name="username")),
                ("first_name", models.CharField(blank=True, max_length=150, verbose_name="first name")),
                ("last_name", models.CharField(blank=True, max_length=150, verbose_name="last name")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="email address")),
                ("is_staff", models.BooleanField(default=False, help_text="Designates whether the user can log into this admin site.", verbose_name="staff status")),
                ("is_active", models.BooleanField(default=True, help_text="Designates whether this user should be treated as active. Unselect this instead of deleting accounts.", verbose_name="active")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date joined")),
                ("role", models.CharField(choices=[("ADMIN", "Admin"), ("USER", "User")], default="USER", max_length=10)),
                ("payment_status", models.CharField(choices=[("UNPAID", "Unpaid"), ("PAID", "Paid"), ("FREE", "Free")], default="UNPAID", max_length=10)),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
            ],
            options={
                "indexes": [models.Index(fields=["payment_status"], name="finance_cor_payment_6b0f1e_idx")],
            },
            managers=[
                ("objects", django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name="FinancialAccount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("ac_type", models.CharField(max_length=32)),
                ("balance", models.DecimalField(decimal_places=2, default=decimal.Decimal("0.00"), max_digits=18)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ("name",),
                "indexes": [models.Index(fields=["ac_type"], name="finance_cor_ac_type_3c9d21_idx")],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=50)),
                ("details", models.TextField()),
                ("entity_id", models.CharField(blank=True, max_length=100, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("admin", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="finance_audit_entries", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["action", "created_at"], name="finance_cor_action_8e2a47_idx"),
                    models.Index(fields=["entity_id"], name="finance_cor_entity__d41f0c_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("tx_type", models.CharField(choices=[("INCOME", "Income"), ("EXPENSE", "Expense"), ("TRANSFER", "Transfer"), ("DISTRIBUTION", "Distribution")], max_length=16)),
                ("status", models.CharField(choices=[("COMPLETED", "Completed"), ("PENDING", "Pending")], default="COMPLETED", max_length=10)),
                ("category", models.CharField(max_length=100)),
                ("description", models.TextField(blank=True, null=True)),
                ("date", models.DateTimeField(default=finance_core.models.transaction.ledger_now)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("transfer_leg", models.CharField(blank=True, choices=[("OUT", "Outgoing"), ("IN", "Incoming")], max_length=3, null=True)),
                ("transfer_id", models.UUIDField(blank=True, db_index=True, null=True)),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transactions", to="finance_core.financialaccount")),
                ("related_account", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="related_transactions", to="finance_core.financialaccount")),
                ("user", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="finance_transactions", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ("-date", "-id"),
                "indexes": [
                    models.Index(fields=["date"], name="finance_cor_date_5a7c10_idx"),
                    models.Index(fields=["status", "date"], name="finance_cor_status_b3e9f2_idx"),
                    models.Index(fields=["tx_type", "date"], name="finance_cor_tx_type_71d4a8_idx"),
                    models.Index(fields=["account", "date"], name="finance_cor_account_2f6e93_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("amount__gt", 0)), name="tx_amount_positive"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(
                                ("tx_type", "TRANSFER"),
                                ("related_account__isnull", False),
                                ("transfer_leg__isnull", False),
                                ("transfer_id__isnull", False),
                            ),
                            models.Q(
                                models.Q(("tx_type", "TRANSFER"), _negated=True),
                                models.Q(
                                    ("related_account__isnull", True),
                                    ("transfer_leg__isnull", True),
                                    ("transfer_id__isnull", True),
                                ),
                            ),
                            _connector="OR",
                        ),
                        name="tx_transfer_fields_consistent",
                    ),
                ],
            },
        ),
    ]
