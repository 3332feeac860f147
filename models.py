# Records as the admin screens see them, decoded from the API's JSON.

from dataclasses import dataclass

ROLES = ("User", "Admin")


def to_int(value):
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def to_float(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def to_text(value):
    return "" if value is None else str(value)


def record_id(data):
    # backend is MongoDB, ids come as _id
    return to_text(data.get("_id", data.get("id")))


@dataclass
class Product:
    id: str
    name: str = ""
    category: str = ""
    quantity: int = 0
    price: float = 0.0
    total_price: float = 0.0
    date: str = ""
    image: str = ""

    @classmethod
    def from_dict(cls, data):
        # totalPrice is taken as sent, never recomputed on read
        return cls(
            id=record_id(data),
            name=to_text(data.get("productName", data.get("name"))),
            category=to_text(data.get("category")),
            quantity=to_int(data.get("quantity")),
            price=to_float(data.get("price")),
            total_price=to_float(data.get("totalPrice")),
            date=to_text(data.get("date")),
            image=to_text(data.get("image")),
        )

    def to_payload(self):
        return {
            "productName": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "price": self.price,
            "totalPrice": self.total_price,
        }

    def recompute_total(self):
        self.total_price = self.quantity * self.price


@dataclass
class User:
    id: str
    username: str = ""
    email: str = ""
    role: str = "User"

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=record_id(data),
            username=to_text(data.get("username")),
            email=to_text(data.get("email")),
            role=to_text(data.get("role")) or "User",
        )

    def to_payload(self):
        return {"username": self.username, "email": self.email, "role": self.role}
