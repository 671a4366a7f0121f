import pytest

from apps.core.models import ShopSession
from apps.qr_codes.models import QRCode

SHOP = "demo-store.myshopify.com"
OTHER_SHOP = "other-store.myshopify.com"

PRODUCT = {
    "title": "Sale item",
    "images": {"nodes": [{"url": "https://cdn.example.com/sale.png", "altText": "Sale item photo"}]},
}


class FakeAdminApi:
    def __init__(self, product=PRODUCT):
        self.product = product
        self.calls = []

    def graphql(self, query, variables=None):
        self.calls.append(variables)
        return {"data": {"product": self.product}}


@pytest.fixture
def admin_api():
    return FakeAdminApi()


@pytest.fixture
def shop_session(db):
    return ShopSession.objects.create(shop=SHOP, access_token="shpat_test", scope="read_products")


@pytest.fixture
def make_qr_code(db):
    def factory(**overrides):
        values = {
            "shop": SHOP,
            "title": "Summer sale",
            "product_id": "gid://shopify/Product/1",
            "product_variant_id": "gid://shopify/ProductVariant/11",
            "product_handle": "sale-item",
            "destination": "product",
        }
        values.update(overrides)
        return QRCode.objects.create(**values)

    return factory


@pytest.fixture
def app_client(client, shop_session, admin_api, monkeypatch):
    """Django test client logged in to ``SHOP`` with the admin API faked out."""
    monkeypatch.setattr(
        "apps.core.shopify.ShopifyAdminClient.graphql",
        lambda self, query, variables=None: admin_api.graphql(query, variables),
    )
    session = client.session
    session["shop"] = SHOP
    session.save()
    return client
