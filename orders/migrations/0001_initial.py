from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_sub", models.CharField(db_index=True, max_length=128)),
                ("order_number", models.CharField(editable=False, max_length=40, unique=True)),
                ("product_name", models.CharField(max_length=200)),
                ("quantity", models.PositiveSmallIntegerField()),
                ("delivery_date", models.DateField()),
                ("delivery_time", models.CharField(max_length=8)),
                ("delivery_location", models.CharField(max_length=50)),
                ("message", models.TextField(blank=True, default="")),
                ("status", models.CharField(choices=[("pending", "pending"), ("confirmed", "confirmed"), ("processing", "processing"), ("shipped", "shipped"), ("delivered", "delivered"), ("cancelled", "cancelled")], default="pending", max_length=20)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("shipped_at", models.DateTimeField(blank=True, null=True)),
                ("delivered_at", models.DateTimeField(blank=True, null=True)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.CharField(blank=True, default="", max_length=512)),
            ],
            options={
                "db_table": "orders",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["user_sub", "-created_at"], name="order_user_created_idx"),
                    models.Index(fields=["delivery_date", "delivery_time"], name="order_delivery_slot_idx"),
                    models.Index(fields=["status"], name="order_status_idx"),
                    models.Index(fields=["-created_at"], name="order_created_idx"),
                ],
            },
        ),
    ]
