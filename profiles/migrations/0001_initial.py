import django.core.validators
import django.utils.timezone
from django.db import migrations, models

import profiles.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("auth0_id", models.CharField(max_length=128, unique=True, validators=[profiles.validators.validate_identity_id])),
                ("email", models.EmailField(max_length=254, unique=True, validators=[django.core.validators.validate_email])),
                ("name", models.CharField(max_length=100, validators=[profiles.validators.validate_display_name])),
                ("username", models.CharField(max_length=30, unique=True, validators=[profiles.validators.validate_username])),
                ("picture", models.URLField(blank=True, default="", max_length=500)),
                ("contact_number", models.CharField(blank=True, default="", max_length=30, validators=[profiles.validators.validate_contact_number])),
                ("country", models.CharField(blank=True, default="", max_length=50, validators=[profiles.validators.validate_country])),
                ("notifications", models.BooleanField(default=True)),
                ("newsletter", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("last_login", models.DateTimeField(default=django.utils.timezone.now)),
                ("login_attempts", models.PositiveIntegerField(default=0)),
                ("lock_until", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "profiles",
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["-created_at"], name="profile_created_idx")],
            },
        ),
    ]
