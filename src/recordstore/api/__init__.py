"""
Record Store API Helpers
FastAPI integration for the error taxonomy
"""
from recordstore.api.error_handlers import data_access_exception_handler, register_exception_handlers
from recordstore.api.response_models import ErrorDetail, ErrorResponse

__all__ = [
    "ErrorDetail",
    "ErrorResponse",
    "data_access_exception_handler",
    "register_exception_handlers",
]
