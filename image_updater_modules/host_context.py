"""
Host context selection.

The tool either runs standalone or on behalf of a shop that embeds it in the
Shopify admin. Which one applies is decided once at startup and the rest of
the application only talks to the selected HostContext.
"""

import logging
from typing import Dict, Optional
from urllib.parse import urlencode


def normalize_shop_domain(shop: Optional[str]) -> Optional[str]:
    """Strip scheme and trailing slash: 'https://a.myshopify.com/' -> 'a.myshopify.com'."""
    if not shop:
        return None
    shop = shop.strip().replace("https://", "").replace("http://", "").rstrip("/")
    return shop or None


class HostContext:
    is_embedded = False

    def __init__(self, shop: Optional[str] = None, app_url: str = ""):
        self.shop = normalize_shop_domain(shop)
        self.app_url = (app_url or "").rstrip("/")

    @property
    def name(self) -> str:
        return "standalone"

    def storefront_url(self, handle: str) -> Optional[str]:
        """Public product URL, or None when no shop is known."""
        if not self.shop or not handle:
            return None
        return f"https://{self.shop}/products/{handle}"


class StandaloneHostContext(HostContext):
    """Running outside the Shopify admin."""


class EmbeddedHostContext(HostContext):
    """Running as an app embedded in a shop's admin."""

    is_embedded = True

    def __init__(self, shop: str, host: str, api_key: str, app_url: str = ""):
        super().__init__(shop, app_url)
        self.host = host
        self.api_key = api_key

    @property
    def name(self) -> str:
        return "embedded"

    def admin_app_url(self) -> str:
        return f"https://{self.shop}/admin/apps/{self.api_key}"

    def launch_url(self) -> str:
        """App URL with the shop/host parameters the admin passes to embedded apps."""
        return f"{self.app_url}/?{urlencode({'shop': self.shop, 'host': self.host})}"


def select_host_context(cfg: Dict, shop: Optional[str] = None, host: Optional[str] = None) -> HostContext:
    """
    Pick the host context for this run.

    Embedded only when shop, host and SHOPIFY_API_KEY are all present.
    """
    api_key = (cfg.get("SHOPIFY_API_KEY") or "").strip()
    app_url = cfg.get("APP_URL", "")

    if normalize_shop_domain(shop) and host and api_key:
        context = EmbeddedHostContext(shop, host, api_key, app_url)
    else:
        context = StandaloneHostContext(shop, app_url)

    logging.info(f"Host context: {context.name} (shop={context.shop or 'unknown'})")
    return context
