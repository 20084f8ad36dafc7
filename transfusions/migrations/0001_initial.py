import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
        ("blood_requests", "0001_initial"),
        ("patients", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Transfusion",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("transfusion_date", models.DateTimeField()),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("medical_officer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transfusions", to="accounts.medicalofficer")),
                ("patient", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transfusions", to="patients.patient")),
                ("request", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transfusions", to="blood_requests.bloodrequest")),
            ],
            options={
                "ordering": ["-transfusion_date"],
                "indexes": [
                    models.Index(fields=["patient", "transfusion_date"], name="transfusion_patient_date_idx"),
                ],
            },
        ),
    ]
