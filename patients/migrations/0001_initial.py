import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Patient",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("hospital_id", models.CharField(error_messages={"unique": "Patient with this hospital ID already exists."}, max_length=40, unique=True)),
                ("first_name", models.CharField(max_length=120)),
                ("last_name", models.CharField(max_length=120)),
                ("date_of_birth", models.DateField()),
                ("gender", models.CharField(choices=[("MALE", "Male"), ("FEMALE", "Female"), ("OTHER", "Other")], max_length=10)),
                ("blood_type", models.CharField(choices=[("A_POSITIVE", "A+"), ("A_NEGATIVE", "A-"), ("B_POSITIVE", "B+"), ("B_NEGATIVE", "B-"), ("AB_POSITIVE", "AB+"), ("AB_NEGATIVE", "AB-"), ("O_POSITIVE", "O+"), ("O_NEGATIVE", "O-")], max_length=16)),
                ("contact_number", models.CharField(blank=True, max_length=20, validators=[django.core.validators.RegexValidator(message="Contact number must contain 7 to 15 digits, optionally prefixed with +.", regex="^\\+?\\d{7,15}$")])),
                ("address", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("medical_officer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="patients", to="accounts.medicalofficer")),
            ],
            options={
                "ordering": ["last_name", "first_name"],
                "indexes": [
                    models.Index(fields=["last_name", "first_name"], name="patient_name_idx"),
                    models.Index(fields=["blood_type"], name="patient_blood_type_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="MedicalRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("record_type", models.CharField(choices=[("DIAGNOSIS", "Diagnosis"), ("TREATMENT", "Treatment"), ("LAB_RESULT", "Lab Result"), ("TRANSFUSION", "Transfusion"), ("NOTE", "Note")], default="NOTE", max_length=16)),
                ("title", models.CharField(max_length=200)),
                ("details", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("medical_officer", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="medical_records", to="accounts.medicalofficer")),
                ("patient", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="medical_records", to="patients.patient")),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
