import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


BLOOD_TYPES = [
    ("A_POSITIVE", "A+"), ("A_NEGATIVE", "A-"), ("B_POSITIVE", "B+"), ("B_NEGATIVE", "B-"),
    ("AB_POSITIVE", "AB+"), ("AB_NEGATIVE", "AB-"), ("O_POSITIVE", "O+"), ("O_NEGATIVE", "O-"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Donor",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("blood_type", models.CharField(choices=BLOOD_TYPES, max_length=16)),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                ("gender", models.CharField(blank=True, choices=[("MALE", "Male"), ("FEMALE", "Female"), ("OTHER", "Other")], max_length=10)),
                ("weight_kg", models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True)),
                ("height_cm", models.DecimalField(blank=True, decimal_places=1, max_digits=5, null=True)),
                ("medical_history", models.TextField(blank=True)),
                ("last_donation_date", models.DateTimeField(blank=True, null=True)),
                ("eligible_to_donate_since", models.DateTimeField(blank=True, null=True)),
                ("donation_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="donor", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["blood_type"], name="donor_blood_type_idx"),
                    models.Index(fields=["eligible_to_donate_since"], name="donor_eligible_since_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="DonorScreening",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("ELIGIBLE", "Eligible"), ("DEFERRED", "Deferred")], default="PENDING", max_length=10)),
                ("vitals", models.JSONField(blank=True, default=dict)),
                ("questionnaire_completed", models.BooleanField(default=False)),
                ("deferral_reason", models.TextField(blank=True)),
                ("deferral_period", models.CharField(blank=True, choices=[("1-month", "1 month"), ("3-months", "3 months"), ("6-months", "6 months"), ("12-months", "12 months"), ("permanent", "Permanent")], max_length=12)),
                ("deferred_until", models.DateTimeField(blank=True, null=True)),
                ("notes", models.TextField(blank=True)),
                ("screened_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("donor", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="screenings", to="donors.donor")),
                ("screened_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="donor_screenings", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-screened_at"],
            },
        ),
    ]
