import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("donations", "0001_initial"),
        ("transfusions", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="BloodUnit",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("unit_number", models.CharField(error_messages={"unique": "Blood unit with this unit number already exists."}, max_length=40, unique=True)),
                ("blood_type", models.CharField(choices=[("A_POSITIVE", "A+"), ("A_NEGATIVE", "A-"), ("B_POSITIVE", "B+"), ("B_NEGATIVE", "B-"), ("AB_POSITIVE", "AB+"), ("AB_NEGATIVE", "AB-"), ("O_POSITIVE", "O+"), ("O_NEGATIVE", "O-")], max_length=16)),
                ("component_type", models.CharField(choices=[("WHOLE_BLOOD", "Whole Blood"), ("RED_CELLS", "Red Blood Cells"), ("PLASMA", "Plasma"), ("PLATELETS", "Platelets"), ("CRYOPRECIPITATE", "Cryoprecipitate")], default="WHOLE_BLOOD", max_length=20)),
                ("volume_ml", models.PositiveIntegerField(default=450)),
                ("status", models.CharField(choices=[("AVAILABLE", "Available"), ("RESERVED", "Reserved"), ("USED", "Used"), ("EXPIRED", "Expired"), ("DISCARDED", "Discarded"), ("QUARANTINED", "Quarantined")], default="AVAILABLE", max_length=12)),
                ("collection_date", models.DateTimeField()),
                ("expiry_date", models.DateTimeField()),
                ("notes", models.TextField(blank=True)),
                ("qc_results", models.JSONField(blank=True, default=dict)),
                ("qc_notes", models.TextField(blank=True)),
                ("qc_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("donation", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="blood_units", to="donations.donation")),
                ("qc_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="blood_units_inspected", to=settings.AUTH_USER_MODEL)),
                ("technician", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="blood_units", to="accounts.bloodbanktechnician")),
                ("transfusion", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="blood_units", to="transfusions.transfusion")),
            ],
            options={
                "ordering": ["expiry_date"],
                "indexes": [
                    models.Index(fields=["blood_type", "status"], name="bloodunit_type_status_idx"),
                    models.Index(fields=["expiry_date"], name="bloodunit_expiry_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("status", "USED"), _negated=True) | models.Q(("transfusion__isnull", False)),
                        name="bloodunit_used_has_transfusion",
                    ),
                ],
            },
        ),
    ]
