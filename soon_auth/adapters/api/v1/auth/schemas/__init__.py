from .requests import (
    DeleteAccountRequest,
    SignInRequest,
    SignUpRequest,
    UpdateAccountRequest,
    UpdatePasswordRequest,
)
from .responses import (
    ActivityEntryResponse,
    ActivityListResponse,
    ErrorResponse,
    MessageResponse,
    UserResponse,
)

__all__ = [
    "DeleteAccountRequest",
    "SignInRequest",
    "SignUpRequest",
    "UpdateAccountRequest",
    "UpdatePasswordRequest",
    "ActivityEntryResponse",
    "ActivityListResponse",
    "ErrorResponse",
    "MessageResponse",
    "UserResponse",
]
