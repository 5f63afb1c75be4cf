"""Unversioned routes: health checks and WebSocket channels."""
