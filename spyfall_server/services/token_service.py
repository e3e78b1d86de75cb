"""
Player Token Service

Issues and verifies the signed tokens that tie a client connection to a
lobby player. There are no accounts: a token is handed out when a player
creates or joins a lobby.
"""

import datetime
from typing import Any, Dict, Optional

import jwt


class PlayerTokenService:
    """
    JWT issuing and verification for lobby players.
    """

    def __init__(self, jwt_secret: str, expiration_hours: int = 12):
        """
        Args:
            jwt_secret: Secret key for HS256 signing
            expiration_hours: Token lifetime
        """
        self.jwt_secret = jwt_secret
        self.expiration_hours = expiration_hours

    def issue_token(self, player_id: str, lobby_code: str, name: str) -> str:
        now = datetime.datetime.now(datetime.timezone.utc)
        payload = {
            "player_id": player_id,
            "lobby_code": lobby_code,
            "name": name,
            "iat": now,
            "exp": now + datetime.timedelta(hours=self.expiration_hours),
        }
        return jwt.encode(payload, self.jwt_secret, algorithm="HS256")

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode a player token.

        Args:
            token: JWT token string

        Returns:
            Dictionary with success status and player data or error
        """
        if not token:
            return {"success": False, "error": "Token is required"}

        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            return {"success": False, "error": "Token has expired"}
        except jwt.InvalidTokenError:
            return {"success": False, "error": "Invalid token"}

        if not payload.get("player_id") or not payload.get("lobby_code"):
            return {"success": False, "error": "Invalid token payload"}

        return {
            "success": True,
            "player": {
                "player_id": payload["player_id"],
                "lobby_code": payload["lobby_code"],
                "name": payload.get("name"),
            }
        }


# Global service instance
_token_service = None


def get_token_service() -> Optional[PlayerTokenService]:
    """Get the global token service instance."""
    return _token_service


def initialize_token_service(jwt_secret: str, expiration_hours: int = 12) -> PlayerTokenService:
    """Initialize the global token service instance."""
    global _token_service
    _token_service = PlayerTokenService(jwt_secret, expiration_hours)
    return _token_service
