from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="QRCode",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("shop", models.CharField(db_index=True, max_length=255)),
                ("title", models.CharField(max_length=255)),
                ("product_id", models.CharField(max_length=255)),
                ("product_variant_id", models.CharField(blank=True, default="", max_length=255)),
                ("product_handle", models.CharField(blank=True, default="", max_length=255)),
                (
                    "destination",
                    models.CharField(
                        choices=[("product", "Product page"), ("cart", "Checkout page with product in the cart")],
                        default="product",
                        max_length=16,
                    ),
                ),
                ("scans", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "QR code",
                "verbose_name_plural": "QR codes",
                "ordering": ["-id"],
            },
        ),
    ]
