import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("patients", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="BloodRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("blood_type", models.CharField(choices=[("A_POSITIVE", "A+"), ("A_NEGATIVE", "A-"), ("B_POSITIVE", "B+"), ("B_NEGATIVE", "B-"), ("AB_POSITIVE", "AB+"), ("AB_NEGATIVE", "AB-"), ("O_POSITIVE", "O+"), ("O_NEGATIVE", "O-")], max_length=16)),
                ("units", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("fulfilled_units", models.PositiveIntegerField(default=0)),
                ("urgency", models.CharField(choices=[("LOW", "Low"), ("NORMAL", "Normal"), ("HIGH", "High"), ("CRITICAL", "Critical")], default="NORMAL", max_length=10)),
                ("status", models.CharField(choices=[("PENDING", "Pending"), ("APPROVED", "Approved"), ("PARTIALLY_FULFILLED", "Partially fulfilled"), ("FULFILLED", "Fulfilled"), ("REJECTED", "Rejected"), ("CANCELLED", "Cancelled")], default="PENDING", max_length=20)),
                ("reason", models.TextField(blank=True)),
                ("notes", models.TextField(blank=True)),
                ("required_by", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("patient", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="blood_requests", to="patients.patient")),
                ("requester", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="blood_requests", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["status", "-created_at"],
                "indexes": [
                    models.Index(fields=["status", "urgency"], name="bloodreq_status_urgency_idx"),
                    models.Index(fields=["blood_type"], name="bloodreq_blood_type_idx"),
                ],
            },
        ),
    ]
