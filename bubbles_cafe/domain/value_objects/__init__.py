from .session_context import SessionContext

__all__ = ["SessionContext"]
