"""
Identity Resolver: maps a wallet address and/or a Farcaster fid to exactly
one User row, creating it when neither is known.

Policy (the only place this is decided)
---------------------------------------
  1. address given and known     → update username/pfp hints, return.
  2. fid given and known         → update username/pfp hints, attach the
                                   address only if the row has none, return.
                                   A row already bound to another address
                                   keeps it; identities are never merged.
  3. otherwise                   → create. Without an explicit fid one is
                                   derived from the address suffix.

Derived fids are used for creation only, never for lookup: they are not
unique, and looking one up would bind a wallet to an unrelated user.

Conflicts at creation (concurrent callers)
------------------------------------------
Each attempt runs in a savepoint. On IntegrityError:
  - the address or the explicit fid now exists → return that row
  - a derived fid collided                    → perturb and retry
At most _MAX_CREATE_ATTEMPTS attempts, then CreationExhaustedError.
"""
from __future__ import annotations

import logging
import random
import re
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from meowpair.core.errors import CreationExhaustedError, ValidationError
from meowpair.models.user import User

logger = logging.getLogger(__name__)

_ADDRESS_RE = re.compile(r"^0x[0-9a-f]{40}$")
_INT32_MAX = 2147483647
_SUFFIX_LEN = 8
_MAX_CREATE_ATTEMPTS = 10
_MAX_PERTURBATION = 999


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def normalize_address(address: str) -> str:
    """Lower-case and validate an EVM address. Raises ValidationError."""
    normalized = address.strip().lower()
    if not _ADDRESS_RE.match(normalized):
        raise ValidationError(f"Invalid wallet address: {address!r}", field="address")
    return normalized


def derive_fid(address: str) -> int:
    """Pseudo-fid from the last 8 hex digits of an address, in [1, 2^31-1)."""
    derived = int(address[-_SUFFIX_LEN:], 16) % _INT32_MAX
    return derived or 1


def _perturb(fid: int) -> int:
    return (fid + random.randint(1, _MAX_PERTURBATION)) % _INT32_MAX or 1


def _placeholder_name(address: Optional[str], fid: int) -> str:
    if address:
        return f"wallet_{address[-6:]}"
    return f"user_{fid}"


def get_user_by_fid(db: Session, fid: int) -> Optional[User]:
    return db.query(User).filter(User.fid == fid).first()


def get_user_by_address(db: Session, address: str) -> Optional[User]:
    return db.query(User).filter(User.address == normalize_address(address)).first()


def _apply_hints(user: User, display_name: Optional[str], pfp_url: Optional[str]) -> None:
    if display_name:
        user.username = display_name
    if pfp_url:
        user.pfp_url = pfp_url


# ---------------------------------------------------------------------------
# Creation with bounded retry
# ---------------------------------------------------------------------------

def _create_user(
    db: Session,
    address: Optional[str],
    fid: Optional[int],
    display_name: Optional[str],
    pfp_url: Optional[str],
) -> User:
    explicit_fid = fid is not None
    candidate = fid if explicit_fid else derive_fid(address)

    for attempt in range(1, _MAX_CREATE_ATTEMPTS + 1):
        user = User(
            fid=candidate,
            address=address,
            username=display_name or _placeholder_name(address, candidate),
            pfp_url=pfp_url,
        )
        savepoint = db.begin_nested()
        try:
            db.add(user)
            db.flush()
            savepoint.commit()
            return user
        except IntegrityError as exc:
            savepoint.rollback()
            conflict = exc

        # Someone else created this identity between our lookup and insert.
        if address:
            winner = db.query(User).filter(User.address == address).first()
            if winner is not None:
                return winner
        if explicit_fid:
            winner = get_user_by_fid(db, candidate)
            if winner is not None:
                return winner
            raise conflict
        if get_user_by_fid(db, candidate) is None:
            raise conflict

        logger.info(
            "Derived fid %s taken (attempt %s/%s) for address %s",
            candidate, attempt, _MAX_CREATE_ATTEMPTS, address,
        )
        candidate = _perturb(candidate)

    raise CreationExhaustedError(attempts=_MAX_CREATE_ATTEMPTS, address=address)


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def resolve_or_create_user(
    db: Session,
    address: Optional[str] = None,
    fid: Optional[int] = None,
    display_name: Optional[str] = None,
    pfp_url: Optional[str] = None,
) -> User:
    """
    Find or create the canonical User for (address, fid) and commit.
    See module docstring for the reconciliation rules.
    """
    if address is None and fid is None:
        raise ValidationError("A wallet address or fid is required.", field="address")
    if fid is not None and not 0 < fid <= _INT32_MAX:
        raise ValidationError(f"fid out of range: {fid}", field="fid")
    if address is not None:
        address = normalize_address(address)

    user: Optional[User] = None
    if address is not None:
        user = db.query(User).filter(User.address == address).first()
        if user is not None:
            _apply_hints(user, display_name, pfp_url)

    if user is None and fid is not None:
        user = get_user_by_fid(db, fid)
        if user is not None:
            _apply_hints(user, display_name, pfp_url)
            if address is not None:
                if user.address is None:
                    user.address = address
                elif user.address != address:
                    logger.warning(
                        "fid %s already bound to %s; not rebinding to %s",
                        fid, user.address, address,
                    )

    if user is None:
        user = _create_user(db, address, fid, display_name, pfp_url)

    db.commit()
    db.refresh(user)
    return user


def resolve_caller(
    db: Session,
    fid: int,
    address: Optional[str] = None,
    field: str = "wallet_address",
) -> User:
    """
    The authenticated caller's User. `address` is an unverified hint: a
    wallet already bound to a user with another fid is refused, so the
    body can never swap the caller for someone else.
    """
    if address is not None:
        holder = get_user_by_address(db, address)
        if holder is not None and holder.fid != fid:
            logger.warning("fid %s presented wallet %s bound to fid %s", fid, holder.address, holder.fid)
            raise ValidationError("Wallet address belongs to another user.", field=field)
    return resolve_or_create_user(db, address=address, fid=fid)
