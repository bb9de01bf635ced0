# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Like endpoints – per-credential like counters for targets.

Counters are keyed by the blind index of the target, so every like of the
same plaintext target lands on one row even though each request encrypts the
target with a fresh nonce.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from database import get_db
from core.errors import InvalidInputError
from core.security import Credential, get_credential
from likes.schemas import LikeCountResponse, LikeRequest
from store import PartitionedStore

router = APIRouter(tags=["likes"])


# ---------------------------------------------------------------------------
# POST /like-target
# ---------------------------------------------------------------------------


@router.post("/like-target", status_code=status.HTTP_204_NO_CONTENT)
def like_target(
    body: LikeRequest,
    cred: Credential = Depends(get_credential),
    db: Session = Depends(get_db),
):
    """Add one like.  The first like creates the counter at 1."""
    PartitionedStore(db).increment_like(cred.partition_hash, cred.seal(body.target))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# GET /get-likes?target=…
# ---------------------------------------------------------------------------


@router.get("/get-likes", response_model=LikeCountResponse)
def get_likes(
    target: str = "",
    cred: Credential = Depends(get_credential),
    db: Session = Depends(get_db),
):
    """Current count for *target*; 0 when it has never been liked."""
    if not target:
        raise InvalidInputError("Missing target")
    count = PartitionedStore(db).get_like_count(cred.partition_hash, cred.index(target))
    return LikeCountResponse(like_count=count)
