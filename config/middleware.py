ADMIN_ORIGIN = "https://admin.shopify.com"


class EmbeddedAppHeadersMiddleware:
    """Lets the platform admin frame the app for the current shop only."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        shop = request.GET.get("shop")
        if not shop and hasattr(request, "session"):
            shop = request.session.get("shop")

        if shop:
            policy = f"frame-ancestors https://{shop} {ADMIN_ORIGIN};"
        else:
            policy = "frame-ancestors 'none';"
        response.setdefault("Content-Security-Policy", policy)
        return response
