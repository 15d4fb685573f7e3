"""
JSON View
Formats responses and errors as JSON
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import HTTPException

from ..exceptions import LedgerbookError
from ..models.response import ErrorResponse, SuccessResponse
from ..utils.constants import ErrorCode

# HTTP status per error code; anything else is a server error
ERROR_STATUS = {
    ErrorCode.VOUCHER_NOT_FOUND: 404,
    ErrorCode.LEDGER_NOT_FOUND: 404,
    ErrorCode.DUPLICATE_VOUCHER: 409,
    ErrorCode.UNBALANCED_VOUCHER: 422,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.STORE_NOT_INITIALIZED: 503,
}


class JsonView:
    """JSON response formatter"""
    
    @staticmethod
    def success(message: str = "", data: Any = None) -> Dict:
        """Format success response"""
        return SuccessResponse(message=message, data=data).model_dump()
    
    @staticmethod
    def error(code: str, message: str, details: Optional[Any] = None) -> Dict:
        """Format error response"""
        return ErrorResponse(
            code=code,
            message=message,
            details=details,
            timestamp=datetime.now().isoformat()
        ).model_dump()
    
    @staticmethod
    def paginated(data: List, total: int, limit: int, offset: int) -> Dict:
        """Format paginated response"""
        return {
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(data),
            "data": data
        }
    
    @staticmethod
    def http_exception(error: LedgerbookError) -> HTTPException:
        """Map a core error to an HTTPException carrying the error payload"""
        return HTTPException(
            status_code=ERROR_STATUS.get(error.code, 500),
            detail=JsonView.error(error.code, error.message, error.details)
        )
