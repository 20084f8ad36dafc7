import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("donors", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Donation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("scheduled_date", models.DateTimeField()),
                ("actual_date", models.DateTimeField(blank=True, null=True)),
                ("status", models.CharField(choices=[("SCHEDULED", "Scheduled"), ("COMPLETED", "Completed"), ("CANCELLED", "Cancelled"), ("DEFERRED", "Deferred"), ("PROCESSED", "Processed")], default="SCHEDULED", max_length=12)),
                ("hemoglobin_level", models.DecimalField(blank=True, decimal_places=1, max_digits=4, null=True)),
                ("blood_pressure", models.CharField(blank=True, max_length=16)),
                ("pulse", models.PositiveIntegerField(blank=True, null=True)),
                ("volume_ml", models.PositiveIntegerField(blank=True, null=True)),
                ("notes", models.TextField(blank=True)),
                ("test_results", models.JSONField(blank=True, default=dict)),
                ("rejection_reason", models.TextField(blank=True)),
                ("tested_at", models.DateTimeField(blank=True, null=True)),
                ("processed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="donations_created", to=settings.AUTH_USER_MODEL)),
                ("donor", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="donations", to="donors.donor")),
                ("technician", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="donations", to="accounts.bloodbanktechnician")),
                ("tested_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="donations_tested", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-scheduled_date"],
                "indexes": [
                    models.Index(fields=["donor", "status"], name="donation_donor_status_idx"),
                    models.Index(fields=["scheduled_date"], name="donation_scheduled_idx"),
                ],
            },
        ),
    ]
