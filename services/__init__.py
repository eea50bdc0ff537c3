from services.auth_protocol import AuthProtocol, LoginResult
from services.session_store import SessionStore

__all__ = ["AuthProtocol", "LoginResult", "SessionStore"]
