"""userkit: account record store and signed bearer-token codec."""

from userkit.core.errors import (
    ErrorKind, UserKitError, UserNotFoundError, StorageError,
    MalformedTokenError, InvalidSignatureError,
)
from userkit.core.token_codec import (
    EncodedToken, TokenPayload, encode_token, decode_token,
)
from userkit.schemas.user import UserRecord
from userkit.services.user_store import UserStore

__all__ = [
    "ErrorKind", "UserKitError", "UserNotFoundError", "StorageError",
    "MalformedTokenError", "InvalidSignatureError",
    "EncodedToken", "TokenPayload", "encode_token", "decode_token",
    "UserRecord", "UserStore",
]
