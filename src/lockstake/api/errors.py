from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from lockstake.ledger.token import TokenError
from lockstake.runtime.errors import StakingError

# StakingError codes that are not plain 400s
_STATUS_BY_CODE = {
    "not_owner": 403,
    "reentrancy": 409,
}


@dataclass(frozen=True, slots=True)
class ApiError(Exception):
    status_code: int
    code: str
    message: str
    details: Dict[str, Any]

    @staticmethod
    def bad_request(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(400, code, message, details or {})

    @staticmethod
    def not_found(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(404, code, message, details or {})

    @staticmethod
    def internal(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> "ApiError":
        return ApiError(500, code, message, details or {})

    @staticmethod
    def from_domain(err: Exception) -> "ApiError":
        if isinstance(err, StakingError):
            details = err.details if isinstance(err.details, dict) else {}
            return ApiError(_STATUS_BY_CODE.get(err.code, 400), err.code, err.reason, details)
        if isinstance(err, TokenError):
            return ApiError(400, err.code, err.reason, dict(err.details or {}))
        return ApiError.internal("internal_error", "unexpected error", {})

    def to_json(self) -> Dict[str, Any]:
        return {"ok": False, "error": {"code": self.code, "message": self.message, "details": self.details}}
