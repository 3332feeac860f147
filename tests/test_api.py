"""Tests for api.InventoryApi against a mocked requests session."""

import unittest
from unittest.mock import MagicMock

import requests

from api import (
    ApiError,
    InvalidCredentials,
    InventoryApi,
    LoginFailed,
    MalformedResponse,
    Unauthorized,
)
from models import Product, User
from tests.helpers import MemorySession, fake_response

BASE = "https://inventaris.example.com"


def _api(token="tok", response=None, **kwargs):
    http = MagicMock()
    if response is not None:
        http.request.return_value = response
    api = InventoryApi(BASE + "/", MemorySession(token), timeout=5, verify=False, http=http, **kwargs)
    return api, http


class TestHeaders(unittest.TestCase):
    def test_bearer_attached_when_token(self) -> None:
        api, http = _api(response=fake_response(200, {"products": []}))
        api.list_products()
        http.request.assert_called_once_with("GET", BASE + "/products",
                                             headers={"Authorization": "Bearer tok"}, timeout=5, verify=False)

    def test_no_header_without_token(self) -> None:
        api, http = _api(token=None, response=fake_response(200, {"products": []}))
        api.list_products()
        self.assertEqual(http.request.call_args.kwargs["headers"], {})


class TestListProducts(unittest.TestCase):
    def test_decodes_products_in_order(self) -> None:
        body = {"products": [
            {"_id": "P1", "productName": "Laptop", "quantity": 3, "price": 1000, "totalPrice": 3000},
            {"_id": "P2", "productName": "Meja", "quantity": 1, "price": 50, "totalPrice": 50},
        ]}
        api, _ = _api(response=fake_response(200, body))
        products = api.list_products()
        self.assertEqual([p.id for p in products], ["P1", "P2"])
        self.assertIsInstance(products[0], Product)

    def test_401_is_unauthorized(self) -> None:
        api, _ = _api(response=fake_response(401, {"message": "jwt expired"}))
        with self.assertRaises(Unauthorized) as ctx:
            api.list_products()
        self.assertEqual(ctx.exception.status, 401)

    def test_missing_products_field_is_malformed(self) -> None:
        api, _ = _api(response=fake_response(200, {"items": []}))
        with self.assertRaises(MalformedResponse):
            api.list_products()

    def test_products_not_a_list_is_malformed(self) -> None:
        api, _ = _api(response=fake_response(200, {"products": "nope"}))
        with self.assertRaises(MalformedResponse):
            api.list_products()

    def test_invalid_json_is_malformed(self) -> None:
        api, _ = _api(response=fake_response(200, invalid_json=True))
        with self.assertRaises(MalformedResponse):
            api.list_products()

    def test_server_error_message(self) -> None:
        api, _ = _api(response=fake_response(500, {"message": "database down"}))
        with self.assertRaises(ApiError) as ctx:
            api.list_products()
        self.assertEqual(ctx.exception.message, "database down")
        self.assertEqual(ctx.exception.status, 500)
        self.assertNotIsInstance(ctx.exception, Unauthorized)

    def test_network_error(self) -> None:
        api, http = _api()
        http.request.side_effect = requests.exceptions.ConnectionError("no route")
        with self.assertRaises(ApiError) as ctx:
            api.list_products()
        self.assertIsNone(ctx.exception.status)


class TestUpdateProduct(unittest.TestCase):
    def test_json_body_and_echo(self) -> None:
        echo = {"_id": "P1", "productName": "Laptop", "quantity": 5, "price": 1000, "totalPrice": 5000}
        api, http = _api(response=fake_response(200, echo))
        fields = {"productName": "Laptop", "quantity": 5, "price": 1000, "totalPrice": 5000}
        product = api.update_product("P1", fields)
        args, kwargs = http.request.call_args
        self.assertEqual(args, ("PUT", BASE + "/products/P1"))
        self.assertEqual(kwargs["json"], fields)
        self.assertNotIn("files", kwargs)
        self.assertEqual(product.total_price, 5000.0)

    def test_enveloped_echo(self) -> None:
        api, _ = _api(response=fake_response(200, {"message": "ok", "product": {"_id": "P1", "quantity": 2}}))
        self.assertEqual(api.update_product("P1", {}).quantity, 2)

    def test_multipart_when_image_attached(self) -> None:
        api, http = _api(response=fake_response(200, {"_id": "P1", "image": "/uploads/a.png"}))
        product = api.update_product("P1", {"productName": "Laptop", "quantity": 5}, image=("a.png", b"\x89PNG"))
        kwargs = http.request.call_args.kwargs
        self.assertEqual(kwargs["data"], {"productName": "Laptop", "quantity": "5"})
        self.assertEqual(kwargs["files"], {"image": ("a.png", b"\x89PNG")})
        self.assertNotIn("json", kwargs)
        self.assertEqual(product.image, "/uploads/a.png")

    def test_non_object_echo_is_malformed(self) -> None:
        api, _ = _api(response=fake_response(200, ["x"]))
        with self.assertRaises(MalformedResponse):
            api.update_product("P1", {})

    def test_echo_without_id_keeps_requested_id(self) -> None:
        api, _ = _api(response=fake_response(200, {"productName": "Laptop", "quantity": 5, "price": 1000}))
        product = api.update_product("P1", {"quantity": 5})
        self.assertEqual(product.id, "P1")
        self.assertEqual(product.quantity, 5)

    def test_enveloped_echo_without_id_keeps_requested_id(self) -> None:
        api, _ = _api(response=fake_response(200, {"product": {"quantity": 2}}))
        self.assertEqual(api.update_product("P7", {}).id, "P7")

    def test_acknowledgement_without_product_is_malformed(self) -> None:
        api, _ = _api(response=fake_response(200, {"message": "Product updated"}))
        with self.assertRaises(MalformedResponse):
            api.update_product("P1", {"quantity": 5})


class TestDelete(unittest.TestCase):
    def test_delete_product(self) -> None:
        api, http = _api(response=fake_response(200, {"message": "deleted"}))
        self.assertTrue(api.delete_product("P2"))
        self.assertEqual(http.request.call_args.args, ("DELETE", BASE + "/products/P2"))

    def test_deleting_missing_and_already_deleted_classified_alike(self) -> None:
        api, http = _api()
        http.request.side_effect = [
            fake_response(404, {"message": "Product not found"}),
            fake_response(404, {"message": "Product not found"}),
        ]
        errors = []
        for product_id in ("does-not-exist", "already-deleted"):
            try:
                api.delete_product(product_id)
            except ApiError as e:
                errors.append((type(e), e.status))
        self.assertEqual(errors, [(ApiError, 404), (ApiError, 404)])


class TestListUsers(unittest.TestCase):
    USERS = [{"_id": "U1", "username": "admin", "email": "a@b.com", "role": "Admin"}]

    def test_bare_list(self) -> None:
        api, http = _api(response=fake_response(200, self.USERS))
        users = api.list_users()
        self.assertEqual(http.request.call_args.args, ("GET", BASE + "/users/get/all"))
        self.assertEqual(users, [User(id="U1", username="admin", email="a@b.com", role="Admin")])

    def test_data_envelope_same_as_bare_list(self) -> None:
        api, _ = _api(response=fake_response(200, {"data": self.USERS}))
        bare_api, _ = _api(response=fake_response(200, self.USERS))
        self.assertEqual(api.list_users(), bare_api.list_users())

    def test_unknown_shape_is_empty(self) -> None:
        api, _ = _api(response=fake_response(200, {"users": self.USERS}))
        self.assertEqual(api.list_users(), [])

    def test_401(self) -> None:
        api, _ = _api(response=fake_response(401, {}))
        with self.assertRaises(Unauthorized):
            api.list_users()


class TestUserMutations(unittest.TestCase):
    def test_update_user(self) -> None:
        api, http = _api(response=fake_response(200, {"message": "updated"}))
        fields = {"username": "kasir", "email": "k@b.com", "role": "User"}
        self.assertTrue(api.update_user("U1", fields))
        self.assertEqual(http.request.call_args.args, ("PUT", BASE + "/users/U1"))
        self.assertEqual(http.request.call_args.kwargs["json"], fields)

    def test_update_user_4xx(self) -> None:
        api, _ = _api(response=fake_response(400, {"message": "Email already used"}))
        with self.assertRaises(ApiError) as ctx:
            api.update_user("U1", {})
        self.assertEqual(ctx.exception.message, "Email already used")

    def test_delete_user(self) -> None:
        api, http = _api(response=fake_response(204, None))
        self.assertTrue(api.delete_user("U1"))
        self.assertEqual(http.request.call_args.args, ("DELETE", BASE + "/users/U1"))


class TestLogin(unittest.TestCase):
    def test_success_returns_token(self) -> None:
        api, http = _api(token=None, response=fake_response(200, {"token": "new-token", "role": "Admin"}))
        result = api.login("admin", "secret")
        self.assertEqual(result.token, "new-token")
        self.assertEqual(result.role, "Admin")
        kwargs = http.request.call_args.kwargs
        self.assertEqual(kwargs["json"], {"username": "admin", "password": "secret"})
        self.assertEqual(kwargs["headers"], {})

    def test_login_never_sends_old_token(self) -> None:
        api, http = _api(token="stale", response=fake_response(200, {"token": "new"}))
        api.login("admin", "secret")
        self.assertEqual(http.request.call_args.kwargs["headers"], {})

    def test_401_is_invalid_credentials(self) -> None:
        api, _ = _api(token=None, response=fake_response(401, {"message": "Invalid"}))
        with self.assertRaises(InvalidCredentials):
            api.login("admin", "wrong")

    def test_other_failure_carries_server_message(self) -> None:
        api, _ = _api(token=None, response=fake_response(500, {"message": "Server sedang sibuk"}))
        with self.assertRaises(LoginFailed) as ctx:
            api.login("admin", "secret")
        self.assertEqual(ctx.exception.message, "Server sedang sibuk")

    def test_missing_token_is_login_failed(self) -> None:
        api, _ = _api(token=None, response=fake_response(200, {"role": "Admin"}))
        with self.assertRaises(LoginFailed):
            api.login("admin", "secret")

    def test_logout(self) -> None:
        api, http = _api(response=fake_response(200, {}))
        self.assertTrue(api.logout())
        self.assertEqual(http.request.call_args.args, ("POST", BASE + "/users/logout"))


if __name__ == "__main__":
    unittest.main()
