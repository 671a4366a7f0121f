import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class ShopifyAdminError(ValueError):
    def __init__(self, errors):
        self.errors = errors
        messages = [e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in errors]
        super().__init__("; ".join(messages) or "Admin API error")


class ShopifyAdminClient:
    def __init__(self, shop, access_token, api_version=None, timeout=None):
        self.shop = shop
        self.access_token = access_token
        self.api_version = api_version or settings.SHOPIFY_API_VERSION
        self.timeout = timeout or settings.SHOPIFY_API_TIMEOUT

    @property
    def graphql_url(self):
        return f"https://{self.shop}/admin/api/{self.api_version}/graphql.json"

    def graphql(self, query, variables=None):
        response = requests.post(
            self.graphql_url,
            json={"query": query, "variables": variables or {}},
            headers={"X-Shopify-Access-Token": self.access_token},
            timeout=self.timeout,
        )
        response.raise_for_status()

        data = response.json()
        if data.get("errors"):
            logger.error("Admin API errors for %s: %s", self.shop, data["errors"])
            raise ShopifyAdminError(data["errors"])

        return data
