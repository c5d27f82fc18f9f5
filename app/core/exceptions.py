from fastapi import HTTPException
from typing import Dict, Any, List, Optional


class APIException(HTTPException):
    code = "error"

    def __init__(self, status_code: int, detail: str, headers: Dict[str, Any] = None, code: Optional[str] = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        if code:
            self.code = code

    def to_content(self) -> Dict[str, Any]:
        return {"success": False, "error": self.detail, "code": self.code}


# =============================================================================
# 400 - caller input problems
# =============================================================================

class ValidationError(APIException):
    code = "validation_error"

    def __init__(self, detail: str, code: Optional[str] = None):
        super().__init__(status_code=400, detail=detail, code=code)


class MissingFieldsError(ValidationError):
    code = "missing_fields"

    def __init__(self, missing_fields: List[str], detail: str = "Missing required fields"):
        super().__init__(detail)
        self.missing_fields = list(missing_fields)

    def to_content(self) -> Dict[str, Any]:
        content = super().to_content()
        content["missingFields"] = self.missing_fields
        return content


class ConflictError(APIException):
    """Duplicate resources - reported as 400 with a dedicated message"""
    code = "conflict"

    def __init__(self, detail: str, code: Optional[str] = None):
        super().__init__(status_code=400, detail=detail, code=code)


class AuthError(APIException):
    code = "auth_error"

    def __init__(self, detail: str, code: Optional[str] = None):
        super().__init__(status_code=400, detail=detail, code=code)


class SignatureError(APIException):
    code = "invalid_signature"

    def __init__(self, detail: str = "Invalid signature"):
        super().__init__(status_code=400, detail=detail)


# =============================================================================
# 404
# =============================================================================

class NotFoundError(APIException):
    code = "not_found"

    def __init__(self, detail: str, code: Optional[str] = None):
        super().__init__(status_code=404, detail=detail, code=code)


# =============================================================================
# 500 - store / gateway / mail transport
# =============================================================================

class UpstreamError(APIException):
    code = "upstream_error"

    def __init__(self, detail: str = "Internal server error", code: Optional[str] = None):
        super().__init__(status_code=500, detail=detail, code=code)


class DeliveryError(UpstreamError):
    code = "delivery_failed"

    def __init__(self, detail: str = "Failed to send OTP"):
        super().__init__(detail)


class GatewayError(UpstreamError):
    code = "gateway_error"

    def __init__(self, detail: str = "Payment initiation failed"):
        super().__init__(detail)
