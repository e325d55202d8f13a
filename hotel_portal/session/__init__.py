"""Session package."""

from hotel_portal.session.session_manager import AuthFailed, Session, SessionManager

__all__ = ["AuthFailed", "Session", "SessionManager"]
