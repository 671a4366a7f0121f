from django.urls import path

from . import views

app_name = "qr_codes"

urlpatterns = [
    path("", views.index, name="index"),
    path("qrcodes/<str:qr_id>/", views.qr_code_detail, name="detail"),
]
