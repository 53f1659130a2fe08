from .auth_context import init_auth_context_middleware
from .request_id import REQUEST_ID_HEADER, init_request_id_middleware

__all__ = ["REQUEST_ID_HEADER", "init_auth_context_middleware", "init_request_id_middleware"]
