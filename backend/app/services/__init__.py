# Storefront Services
from app.services.auth import AuthService
from app.services.product import ProductService
from app.services.revocation import RevocationStore
from app.services.token_codec import TokenCodec
from app.services.token_lifecycle import TokenLifecycleManager, TokenPair
from app.services.user import UserService

__all__ = [
    "AuthService",
    "ProductService",
    "RevocationStore",
    "TokenCodec",
    "TokenLifecycleManager",
    "TokenPair",
    "UserService",
]
