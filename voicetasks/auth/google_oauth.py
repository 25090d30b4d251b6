"""Google ID token verification for sign-in.

The browser obtains the ID token from Google Identity Services; the server
only verifies it. No authorization-code exchange happens here.
"""

import logging
import os
from typing import Optional, Dict
from google.oauth2 import id_token
from google.auth.transport import requests
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

GOOGLE_OAUTH_CLIENT_ID = os.getenv("GOOGLE_OAUTH_CLIENT_ID")

GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


def verify_google_token(id_token_str: str) -> Optional[Dict]:
    """Verify a Google ID token and extract the profile.

    Args:
        id_token_str: ID token from the Google sign-in client

    Returns:
        Dict with id, email, name and picture, or None if the token is
        invalid, issued by someone else or carries no email
    """
    try:
        idinfo = id_token.verify_oauth2_token(id_token_str, requests.Request(), GOOGLE_OAUTH_CLIENT_ID)
    except ValueError as e:
        logger.warning(f"Rejected Google ID token: {str(e)}")
        return None

    if idinfo.get("iss") not in GOOGLE_ISSUERS or not idinfo.get("email"):
        return None

    return {
        "id": idinfo["sub"],
        "email": idinfo["email"],
        "name": idinfo.get("name"),
        "picture": idinfo.get("picture"),
    }
