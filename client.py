# client.py
import json
import os
from typing import Any, Dict, Iterable, Optional

import requests


class StorefrontError(Exception):
    def __init__(self, status: int, message: str, errors: Optional[list] = None):
        super().__init__(f"HTTP {status}: {message}")
        self.status = status
        self.message = message
        self.errors = errors or []


class StorefrontClient:
    """Thin wrapper over the storefront JSON API.

    The underlying session keeps the admin cookie between calls.
    """

    def __init__(self, base_url: str = "http://localhost:5000", timeout: int = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def save_cookies(self, path: str):
        """Write the session cookies to ``path`` so a later run can reuse the login."""
        directory = os.path.dirname(os.path.abspath(path))
        os.makedirs(directory, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(requests.utils.dict_from_cookiejar(self.session.cookies), fh)

    def load_cookies(self, path: str):
        if not os.path.exists(path):
            return
        with open(path, encoding="utf-8") as fh:
            cookies = json.load(fh)
        requests.utils.add_dict_to_cookiejar(self.session.cookies, cookies)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        r = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        if r.status_code >= 400:
            try:
                body = r.json()
            except ValueError:
                body = {}
            if not isinstance(body, dict):
                body = {}
            raise StorefrontError(r.status_code, body.get("message") or r.reason or "",
                                  body.get("errors"))
        return r.json()

    # Catalog
    def list_products(self, category: Optional[str] = None, search: Optional[str] = None,
                      sizes: Iterable[str] = (), colors: Iterable[str] = (),
                      min_price=None, max_price=None, featured: Optional[bool] = None):
        params: Dict[str, Any] = {}
        if category:
            params["category"] = category
        if search:
            params["search"] = search
        if sizes:
            params["size"] = list(sizes)
        if colors:
            params["color"] = list(colors)
        if min_price is not None:
            params["min_price"] = str(min_price)
        if max_price is not None:
            params["max_price"] = str(max_price)
        if featured is not None:
            params["featured"] = "true" if featured else "false"
        return self._request("GET", "/api/products", params=params)

    def get_product(self, product_id: str):
        return self._request("GET", f"/api/products/{product_id}")

    def configuration(self):
        return self._request("GET", "/api/configuration")

    # Admin
    def login(self, username: str, password: str):
        return self._request("POST", "/api/admin/login",
                             json={"username": username, "password": password})["admin"]

    def logout(self):
        return self._request("POST", "/api/admin/logout")

    def me(self):
        return self._request("GET", "/api/admin/me")["admin"]

    def create_product(self, product: Dict[str, Any]):
        return self._request("POST", "/api/products", json=product)["product"]

    def update_product(self, product_id: str, product: Dict[str, Any]):
        return self._request("PUT", f"/api/products/{product_id}", json=product)["product"]

    def delete_product(self, product_id: str):
        return self._request("DELETE", f"/api/products/{product_id}")["ok"]

    def set_configuration(self, key: str, value: str):
        return self._request("POST", "/api/configuration",
                             json={"key": key, "value": value})["config"]
