"""
HTTP client for the inventory backend.

The client only talks to the API and raises; clearing the session and
sending the operator back to the login screen is left to the controllers.
"""

from collections import namedtuple

import requests

from models import Product, User

LoginResult = namedtuple("LoginResult", ["token", "role"])

PRODUCT_FIELDS = {"productName", "name", "category", "quantity", "price", "totalPrice", "date", "image"}


class ApiError(Exception):
    """Network failure or any non-2xx answer. status is None for transport errors."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.message = message
        self.status = status


class Unauthorized(ApiError):
    pass


class MalformedResponse(ApiError):
    pass


class InvalidCredentials(ApiError):
    pass


class LoginFailed(ApiError):
    pass


def server_message(response, default):
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return default


class InventoryApi:
    def __init__(self, base_url, session, timeout=10, verify=True, http=None):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self.verify = verify
        self.http = http or requests.Session()

    def _headers(self):
        token = self.session.get_token()
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    def _request(self, method, path, auth=True, **kwargs):
        url = f"{self.base_url}{path}"
        headers = self._headers() if auth else {}
        try:
            response = self.http.request(method, url, headers=headers, timeout=self.timeout,
                                         verify=self.verify, **kwargs)
        except requests.exceptions.RequestException as e:
            print(f"[InventoryApi] {method} {path} failed: {e}")
            raise ApiError(f"Cannot reach server: {e}")
        print(f"[InventoryApi] {method} {path} -> {response.status_code}")
        if response.status_code == 401:
            raise Unauthorized(server_message(response, "Session is invalid or expired. Please log in again."), 401)
        if response.status_code >= 400:
            message = server_message(response, f"Request failed with status {response.status_code}")
            print(f"[InventoryApi] {method} {path} error: {message}")
            raise ApiError(message, response.status_code)
        return response

    def _json(self, response):
        try:
            return response.json()
        except ValueError:
            raise MalformedResponse("Server returned invalid JSON", response.status_code)

    # --------- AUTH ----------
    def login(self, username, password):
        try:
            response = self._request("POST", "/users/login", auth=False,
                                     json={"username": username, "password": password})
        except Unauthorized:
            raise InvalidCredentials("Login failed, check your username and password.", 401)
        except ApiError as e:
            raise LoginFailed(e.message, e.status)
        try:
            body = self._json(response)
        except MalformedResponse as e:
            raise LoginFailed(e.message, e.status)
        token = body.get("token") if isinstance(body, dict) else None
        if not token:
            raise LoginFailed("Server did not return a token", response.status_code)
        return LoginResult(token=token, role=body.get("role"))

    def logout(self):
        self._request("POST", "/users/logout")
        return True

    # --------- PRODUCTS ----------
    def list_products(self):
        body = self._json(self._request("GET", "/products"))
        if not isinstance(body, dict) or not isinstance(body.get("products"), list):
            raise MalformedResponse("Unexpected data format from server, please check again.")
        return [Product.from_dict(item) for item in body["products"] if isinstance(item, dict)]

    def update_product(self, product_id, fields, image=None):
        """
        image is an optional (filename, bytes) pair; when given the fields go
        out as multipart form data next to the file part.
        """
        path = f"/products/{product_id}"
        if image is None:
            response = self._request("PUT", path, json=fields)
        else:
            filename, data = image
            form = {key: "" if value is None else str(value) for key, value in fields.items()}
            response = self._request("PUT", path, data=form, files={"image": (filename, data)})
        body = self._json(response)
        if isinstance(body, dict) and isinstance(body.get("product"), dict):
            body = body["product"]
        if not isinstance(body, dict) or not PRODUCT_FIELDS.intersection(body):
            raise MalformedResponse("Server did not return the updated product")
        if not body.get("_id") and not body.get("id"):
            body = dict(body, _id=product_id)
        return Product.from_dict(body)

    def delete_product(self, product_id):
        self._request("DELETE", f"/products/{product_id}")
        return True

    # --------- USERS ----------
    def list_users(self):
        body = self._json(self._request("GET", "/users/get/all"))
        if isinstance(body, list):
            items = body
        elif isinstance(body, dict) and isinstance(body.get("data"), list):
            items = body["data"]
        else:
            print(f"[list_users] Response is not a list, using empty list: {str(body)[:200]}")
            items = []
        return [User.from_dict(item) for item in items if isinstance(item, dict)]

    def update_user(self, user_id, fields):
        self._request("PUT", f"/users/{user_id}", json=fields)
        return True

    def delete_user(self, user_id):
        self._request("DELETE", f"/users/{user_id}")
        return True
