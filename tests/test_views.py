import pytest

from apps.core.shopify import ShopifyAdminError
from apps.qr_codes.models import QRCode
from tests.conftest import OTHER_SHOP, SHOP


def detail_url(qr_id):
    return f"/app/qrcodes/{qr_id}/"


def test_new_route_returns_empty_draft(app_client, make_qr_code):
    make_qr_code()

    response = app_client.get(detail_url("new"))

    assert response.status_code == 200
    assert response.json() == {"destination": "product", "title": ""}


def test_existing_route_returns_hydrated_record(app_client, make_qr_code):
    qr_code = make_qr_code()

    data = app_client.get(detail_url(qr_code.pk)).json()

    assert data["id"] == qr_code.pk
    assert data["productTitle"] == "Sale item"
    assert data["destinationUrl"] == f"https://{SHOP}/products/sale-item"


@pytest.mark.parametrize("qr_id", ["abc", "0", "999"])
def test_unknown_ids_are_not_found(app_client, qr_id):
    assert app_client.get(detail_url(qr_id)).status_code == 404


def test_other_shops_record_is_not_found(app_client, make_qr_code):
    qr_code = make_qr_code(shop=OTHER_SHOP)
    assert app_client.get(detail_url(qr_code.pk)).status_code == 404


def test_submit_without_title_returns_errors(app_client):
    response = app_client.post(detail_url("new"), {"title": "", "productId": "123", "destination": "cart"})

    assert response.status_code == 200
    assert response.json() == {"errors": {"title": "Title is required"}}
    assert not QRCode.objects.exists()


def test_submit_new_creates_record(app_client):
    response = app_client.post(
        detail_url("new"),
        {
            "title": "Sale",
            "productId": "gid://1",
            "productVariantId": "gid://1v",
            "productHandle": "sale-item",
            "destination": "product",
        },
    )

    qr_code = QRCode.objects.get()
    data = response.json()["qrCode"]
    assert data["id"] == qr_code.pk
    assert data["title"] == "Sale"
    assert data["productHandle"] == "sale-item"
    assert qr_code.shop == SHOP


def test_submit_existing_overwrites_record(app_client, make_qr_code):
    qr_code = make_qr_code()

    response = app_client.post(
        detail_url(qr_code.pk),
        {"title": "Renamed", "productId": "gid://shopify/Product/2", "destination": "cart"},
    )

    qr_code.refresh_from_db()
    assert response.json()["qrCode"]["title"] == "Renamed"
    assert qr_code.title == "Renamed"
    assert qr_code.destination == "cart"
    assert qr_code.product_handle == ""


def test_delete_action_removes_record(app_client, make_qr_code):
    qr_code = make_qr_code()

    response = app_client.post(detail_url(qr_code.pk), {"action": "delete"})

    assert response.json() == {"deletedId": str(qr_code.pk)}
    assert app_client.get(detail_url(qr_code.pk)).status_code == 404


def test_delete_of_missing_record_is_not_found(app_client):
    assert app_client.post(detail_url(999), {"action": "delete"}).status_code == 404


def test_other_methods_are_rejected(app_client):
    assert app_client.put(detail_url("new")).status_code == 405


def test_admin_api_failure_is_reported(app_client, make_qr_code, monkeypatch):
    qr_code = make_qr_code()

    def failing_graphql(self, query, variables=None):
        raise ShopifyAdminError([{"message": "Throttled"}])

    monkeypatch.setattr("apps.core.shopify.ShopifyAdminClient.graphql", failing_graphql)

    response = app_client.get(detail_url(qr_code.pk))

    assert response.status_code == 502
    assert "error" in response.json()


def test_index_lists_shop_records(app_client, make_qr_code):
    qr_code = make_qr_code()
    make_qr_code(shop=OTHER_SHOP)

    data = app_client.get("/app/").json()

    assert [r["id"] for r in data["qrCodes"]] == [qr_code.pk]


def test_requests_without_a_shop_are_rejected(client, db):
    response = client.get(detail_url("new"))
    assert response.status_code == 401


def test_uninstalled_shop_is_rejected(client, db):
    response = client.get(detail_url("new"), {"shop": "unknown.myshopify.com"})
    assert response.status_code == 401


def test_shop_parameter_starts_a_session(client, shop_session):
    response = client.get(detail_url("new"), {"shop": SHOP})

    assert response.status_code == 200
    assert client.session["shop"] == SHOP
    assert response["Content-Security-Policy"] == (
        f"frame-ancestors https://{SHOP} https://admin.shopify.com;"
    )
    assert client.get(detail_url("new")).status_code == 200


def test_responses_cannot_be_framed_without_a_shop(client, db):
    response = client.get(detail_url("new"))
    assert response["Content-Security-Policy"] == "frame-ancestors 'none';"


def test_scan_redirects_and_counts(client, make_qr_code):
    qr_code = make_qr_code(destination="cart", product_variant_id="gid://shopify/ProductVariant/77")

    response = client.get(f"/qrcodes/{qr_code.pk}/scan/")

    qr_code.refresh_from_db()
    assert response.status_code == 302
    assert response["Location"] == f"https://{SHOP}/cart/77:1"
    assert qr_code.scans == 1


def test_scan_of_missing_record_is_not_found(client, db):
    assert client.get("/qrcodes/404/scan/").status_code == 404


def test_public_page_shows_title_and_image(client, make_qr_code):
    qr_code = make_qr_code()

    data = client.get(f"/qrcodes/{qr_code.pk}/").json()

    assert data["title"] == "Summer sale"
    assert data["image"].startswith("data:image/png;base64,")


def test_delete_of_other_shops_record_is_not_found(app_client, make_qr_code):
    qr_code = make_qr_code(shop=OTHER_SHOP)

    response = app_client.post(detail_url(qr_code.pk), {"action": "delete"})

    assert response.status_code == 404
    assert QRCode.objects.filter(pk=qr_code.pk).exists()


def test_cart_record_without_variant_can_be_read_after_saving(app_client):
    created = app_client.post(
        detail_url("new"),
        {"title": "Sale", "productId": "gid://shopify/Product/2", "destination": "cart"},
    ).json()["qrCode"]

    response = app_client.get(detail_url(created["id"]))

    assert response.status_code == 200
    assert response.json()["destinationUrl"] is None


def test_index_survives_a_record_without_destination(app_client, make_qr_code):
    qr_code = make_qr_code(destination="cart", product_variant_id="")

    response = app_client.get("/app/")

    assert response.status_code == 200
    assert [r["id"] for r in response.json()["qrCodes"]] == [qr_code.pk]


def test_index_reports_admin_api_failure(app_client, make_qr_code, monkeypatch):
    make_qr_code()

    def failing_graphql(self, query, variables=None):
        raise ShopifyAdminError([{"message": "Throttled"}])

    monkeypatch.setattr("apps.core.shopify.ShopifyAdminClient.graphql", failing_graphql)

    response = app_client.get("/app/")

    assert response.status_code == 502
    assert "error" in response.json()


def test_scan_of_record_without_destination_is_not_found(client, make_qr_code):
    qr_code = make_qr_code(destination="cart", product_variant_id="")
    assert client.get(f"/qrcodes/{qr_code.pk}/scan/").status_code == 404
