from django.db import models


class ShopSession(models.Model):
    shop = models.CharField(max_length=255, unique=True)
    access_token = models.CharField(max_length=255)
    scope = models.CharField(max_length=1024, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Shop session"
        verbose_name_plural = "Shop sessions"

    def __str__(self):
        return f"Session for {self.shop}"
