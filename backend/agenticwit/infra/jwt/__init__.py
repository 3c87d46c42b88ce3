from .flask_jwt_token_provider import JWTTokenProvider, register_jwt_callbacks

__all__ = ["JWTTokenProvider", "register_jwt_callbacks"]
