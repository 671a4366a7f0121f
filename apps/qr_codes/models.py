from django.db import models

from .records import DESTINATION_CART, DESTINATION_PRODUCT


class QRCode(models.Model):
    DESTINATION_CHOICES = [
        (DESTINATION_PRODUCT, "Product page"),
        (DESTINATION_CART, "Checkout page with product in the cart"),
    ]

    shop = models.CharField(max_length=255, db_index=True)
    title = models.CharField(max_length=255)
    product_id = models.CharField(max_length=255)
    product_variant_id = models.CharField(max_length=255, blank=True, default="")
    product_handle = models.CharField(max_length=255, blank=True, default="")
    destination = models.CharField(
        max_length=16, choices=DESTINATION_CHOICES, default=DESTINATION_PRODUCT
    )
    scans = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-id"]
        verbose_name = "QR code"
        verbose_name_plural = "QR codes"

    def __str__(self):
        return f"QR code {self.title} for product {self.product_id}"
