from django.contrib import admin
from django.urls import include, path

from apps.qr_codes import views as qr_code_views

urlpatterns = [
    path("admin/", admin.site.urls),
    path("app/", include("apps.qr_codes.urls")),
    path("qrcodes/<int:qr_id>/", qr_code_views.public_qr_code, name="public_qr_code"),
    path("qrcodes/<int:qr_id>/scan/", qr_code_views.scan, name="scan_qr_code"),
]
