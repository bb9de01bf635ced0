# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Tag endpoints – attach tags to targets and look them up in either direction.

Security invariants enforced by every handler
---------------------------------------------
* A credential is required (``get_credential``); every query is filtered by
  its partition hash, so one credential can never see another's rows.
* Targets and tags are stored only as envelopes; lookups use the blind index.
* Read paths decrypt every row or fail the whole request – a partial list is
  never returned.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from core.errors import InvalidInputError
from core.logger import logger, partition_label
from core.security import Credential, get_credential
from store import PartitionedStore
from tags.schemas import AddTagRequest, AddTagResponse, TagListResponse, TargetListResponse

router = APIRouter(tags=["tags"])


# ---------------------------------------------------------------------------
# POST /add-tag
# ---------------------------------------------------------------------------


@router.post("/add-tag", response_model=AddTagResponse, status_code=status.HTTP_201_CREATED)
def add_tag(
    body: AddTagRequest,
    cred: Credential = Depends(get_credential),
    db: Session = Depends(get_db),
):
    """Encrypt target and tag, then record the pair.  409 if already recorded."""
    PartitionedStore(db).insert_tag(cred.partition_hash, cred.seal(body.target), cred.seal(body.tag))
    logger.info("Tag added | partition=%s", partition_label(cred.partition_hash))
    return AddTagResponse(target=body.target, tag=body.tag)


# ---------------------------------------------------------------------------
# GET /get-tags?target=…
# ---------------------------------------------------------------------------


@router.get("/get-tags", response_model=TagListResponse)
def get_tags(
    target: str = "",
    cred: Credential = Depends(get_credential),
    db: Session = Depends(get_db),
):
    """All tags recorded for *target* under the caller's credential."""
    if not target:
        raise InvalidInputError("Missing target")
    envelopes = PartitionedStore(db).list_tags(cred.partition_hash, cred.index(target))
    return TagListResponse(tags=[cred.open(e) for e in envelopes])


# ---------------------------------------------------------------------------
# GET /get-targets?tag=…
# ---------------------------------------------------------------------------


@router.get("/get-targets", response_model=TargetListResponse)
def get_targets(
    tag: str = "",
    cred: Credential = Depends(get_credential),
    db: Session = Depends(get_db),
):
    """All targets carrying *tag* under the caller's credential."""
    if not tag:
        raise InvalidInputError("Missing tag")
    envelopes = PartitionedStore(db).list_targets(cred.partition_hash, cred.index(tag))
    return TargetListResponse(targets=[cred.open(e) for e in envelopes])
