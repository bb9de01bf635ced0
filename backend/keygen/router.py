# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
GET /new-key – server-side credential generator.

No credential is required and nothing is stored: the response is the only
copy of the key.  Clients use it as their Authorization header from then on.
"""

from fastapi import APIRouter

from core.keys import new_key

router = APIRouter(tags=["keys"])


@router.get("/new-key", response_model=str)
def generate_key():
    """32 bytes from the OS CSPRNG, base64url encoded, as a JSON string."""
    return new_key()
