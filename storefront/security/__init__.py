# Cart identity tokens

from .cart_token import CartTokenCodec

__all__ = ["CartTokenCodec"]
