# Storefront Models
from app.models.base import BaseModel
from app.models.product import Product
from app.models.revoked_token import RevokedToken
from app.models.user import User

__all__ = [
    "BaseModel",
    "Product",
    "RevokedToken",
    "User",
]
