import logging
import math
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tourneyhub.core.config import settings
from tourneyhub.core.database import atomic
from tourneyhub.core.errors import (
    CapacityExceeded,
    CooldownActive,
    Forbidden,
    NotFound,
    NotRegistered,
    RegistrationClosed,
    ValidationFailed,
)
from tourneyhub.core.timeutils import epoch_now
from tourneyhub.models.registration import Registration
from tourneyhub.models.team import Team, TeamMember
from tourneyhub.models.tournament import Game, Tournament
from tourneyhub.models.user import User
from tourneyhub.schemas import registration_schemas, tournament_schemas
from tourneyhub.services import wallet_service

logger = logging.getLogger(__name__)

TOURNAMENT_STATUSES = ("draft", "registration", "upcoming", "live", "completed", "cancelled")

# Authoritative lifecycle: draft -> registration -> upcoming -> live -> completed,
# with cancelled reachable from every state before live.
STATUS_TRANSITIONS: Dict[str, Tuple[str, ...]] = {
    "draft": ("registration", "cancelled"),
    "registration": ("upcoming", "cancelled"),
    "upcoming": ("live", "cancelled"),
    "live": ("completed",),
    "completed": (),
    "cancelled": (),
}

# Statuses in which players may join or withdraw
REGISTRATION_WINDOW = frozenset({"registration"})

ALREADY_REGISTERED_MESSAGE = "You are already registered for this tournament"


def get_tournament(db: Session, tournament_id: int) -> Optional[Tournament]:
    return db.query(Tournament).filter(Tournament.id == tournament_id).first()

def _get_tournament_for_update(db: Session, tournament_id: int) -> Optional[Tournament]:
    # Row lock where the backend supports it; SQLite is already serialized by BEGIN IMMEDIATE
    return db.query(Tournament).filter(Tournament.id == tournament_id).with_for_update().first()

def get_registration(db: Session, tournament_id: int, user_uuid: str) -> Optional[Registration]:
    return db.query(Registration).filter(
        Registration.tournament_id == tournament_id,
        Registration.user_uuid == user_uuid,
    ).first()

def _check_team_entry(db: Session, team_id: int, user_uuid: str) -> None:
    team = db.query(Team).filter(Team.id == team_id).first()
    if not team:
        raise ValidationFailed("Invalid team")
    if team.captain_user_uuid == user_uuid:
        return
    member = db.query(TeamMember.id).filter(TeamMember.team_id == team_id, TeamMember.user_uuid == user_uuid).first()
    if member is None:
        raise Forbidden("You are not a member of this team")

def _format_amount(amount) -> str:
    return f"{Decimal(str(amount)).normalize():f}"

def list_tournaments(
    db: Session,
    status: Optional[str] = None,
    game: Optional[str] = None,
    limit: int = 20,
    offset: int = 0,
    include_drafts: bool = False,
) -> Tuple[List[Tournament], int]:
    """
    Returns one page of tournaments (newest first) and the total number matching the filters.
    ``status`` of None or "all" means every status; drafts are hidden unless ``include_drafts``.
    """
    query = db.query(Tournament).outerjoin(Game, Tournament.game_id == Game.id)

    if status and status != "all":
        query = query.filter(Tournament.status == status)
    if not include_drafts:
        query = query.filter(Tournament.status != "draft")
    if game and game != "all":
        query = query.filter(Game.slug == game)

    total = query.count()
    rows = (
        query.order_by(Tournament.created_at.desc(), Tournament.id.desc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return rows, total

def get_tournament_details(db: Session, tournament_id: int, user: Optional[User] = None, user_uuid: Optional[str] = None) -> Dict:
    tournament = get_tournament(db, tournament_id)
    if not tournament:
        raise NotFound("Tournament not found")

    is_admin = bool(user and user.is_admin)
    user_registration = get_registration(db, tournament_id, user_uuid) if user_uuid else None
    if user_registration:
        user_registration = registration_schemas.RegistrationRead.model_validate(user_registration).model_dump()

    registered_players = []
    if is_admin:
        rows = (
            db.query(Registration, User)
            .outerjoin(User, User.id == Registration.user_uuid)
            .filter(Registration.tournament_id == tournament_id)
            .order_by(Registration.joined_at.asc(), Registration.id.asc())
            .all()
        )
        for registration, player in rows:
            registered_players.append({
                "id": registration.id,
                "tournament_id": registration.tournament_id,
                "user_uuid": registration.user_uuid,
                "team_id": registration.team_id,
                "status": registration.status,
                "joined_at": registration.joined_at,
                "username": player.username if player else None,
                "avatar_url": player.avatar_url if player else None,
            })

    details = tournament_schemas.TournamentRead.model_validate(tournament).model_dump()
    details.update(
        user_registration=user_registration,
        is_admin=is_admin,
        registered_players=registered_players,
    )
    return details

def create_tournament(db: Session, tournament: tournament_schemas.TournamentCreate, creator_id: str) -> Tournament:
    game = db.query(Game).filter(Game.slug == tournament.game_slug, Game.is_active.is_(True)).first()
    if not game:
        raise ValidationFailed("Invalid game")

    data = tournament.model_dump(exclude={"game_slug"})
    data["registration_deadline"] = tournament.registration_deadline or tournament.start_date

    with atomic(db):
        db_tournament = Tournament(
            **data,
            game_id=game.id,
            status="draft", # Every tournament starts hidden from players
            current_players=0,
            is_featured=False,
            created_by=creator_id,
        )
        db.add(db_tournament)
    db.refresh(db_tournament)
    logger.info("Tournament %s (%s) created by %s", db_tournament.id, db_tournament.title, creator_id)
    return db_tournament

def update_tournament_status(db: Session, tournament_id: int, new_status: str) -> Tournament:
    if new_status not in TOURNAMENT_STATUSES:
        raise ValidationFailed(f"Invalid status value: {new_status}")

    with atomic(db):
        tournament = _get_tournament_for_update(db, tournament_id)
        if not tournament:
            raise NotFound("Tournament not found")
        if new_status not in STATUS_TRANSITIONS[tournament.status]:
            raise ValidationFailed(f"Cannot change tournament status from {tournament.status} to {new_status}")
        previous = tournament.status
        tournament.status = new_status
    db.refresh(tournament)
    logger.info("Tournament %s moved from %s to %s", tournament_id, previous, new_status)
    return tournament

def delete_tournament(db: Session, tournament_id: int) -> bool:
    with atomic(db):
        tournament = _get_tournament_for_update(db, tournament_id)
        if not tournament:
            raise NotFound("Tournament not found")
        db.delete(tournament) # Registrations go with it (delete-orphan cascade)
    logger.info("Tournament %s deleted", tournament_id)
    return True

def join_tournament(
    db: Session,
    tournament_id: int,
    user_uuid: str,
    team_id: Optional[int] = None,
    now: Optional[int] = None,
) -> Dict:
    """
    Registers ``user_uuid`` for the tournament.

    Capacity is claimed with one conditional UPDATE guarded by
    ``current_players < max_players`` and the registration row is inserted in
    the same transaction, so concurrent joins can never overshoot
    ``max_players``. Joining twice is not an error: the caller gets
    ``alreadyRegistered: True``.
    """
    now = now if now is not None else epoch_now()

    try:
        with atomic(db):
            tournament = _get_tournament_for_update(db, tournament_id)
            if not tournament:
                raise NotFound("Tournament not found")
            if tournament.status not in REGISTRATION_WINDOW:
                raise RegistrationClosed("Tournament is not accepting registrations")

            if get_registration(db, tournament_id, user_uuid):
                return {"success": True, "message": ALREADY_REGISTERED_MESSAGE, "alreadyRegistered": True}

            if team_id is not None:
                _check_team_entry(db, team_id, user_uuid)

            claimed = db.execute(
                update(Tournament)
                .where(Tournament.id == tournament_id, Tournament.current_players < Tournament.max_players)
                .values(current_players=Tournament.current_players + 1, updated_at=now)
                .execution_options(synchronize_session=False)
            ).rowcount
            if claimed != 1:
                raise CapacityExceeded("Tournament is full")

            db.add(Registration(
                tournament_id=tournament_id,
                user_uuid=user_uuid,
                team_id=team_id,
                status="registered",
                joined_at=now,
            ))
    except IntegrityError:
        # Only a committed row for this user means a concurrent join won; anything else is a real failure
        registered = get_registration(db, tournament_id, user_uuid) is not None
        db.rollback()
        if not registered:
            raise
        logger.info("Concurrent duplicate join of tournament %s by %s", tournament_id, user_uuid)
        return {"success": True, "message": ALREADY_REGISTERED_MESSAGE, "alreadyRegistered": True}

    logger.info("User %s registered for tournament %s", user_uuid, tournament_id)
    return {"success": True, "message": "Successfully registered for tournament", "alreadyRegistered": False}

def unregister_from_tournament(
    db: Session,
    tournament_id: int,
    user_uuid: str,
    now: Optional[int] = None,
    cooldown_seconds: Optional[int] = None,
) -> Dict:
    """
    Withdraws ``user_uuid`` from the tournament and refunds the entry fee.

    The registration delete, the counter decrement and the wallet credit
    commit together. The delete must remove exactly one row, so two
    concurrent withdrawals produce a single refund.
    """
    now = now if now is not None else epoch_now()
    if cooldown_seconds is None:
        cooldown_seconds = settings.UNREGISTER_COOLDOWN_SECONDS

    with atomic(db):
        tournament = _get_tournament_for_update(db, tournament_id)
        if not tournament:
            raise NotFound("Tournament not found")
        if tournament.status not in REGISTRATION_WINDOW:
            raise RegistrationClosed("Cannot unregister after registration period has ended")

        registration = get_registration(db, tournament_id, user_uuid)
        if not registration:
            raise NotRegistered("You are not registered for this tournament")

        elapsed = now - registration.joined_at
        if elapsed < cooldown_seconds:
            raise CooldownActive(math.ceil((cooldown_seconds - elapsed) / 60))

        deleted = db.execute(
            delete(Registration)
            .where(Registration.id == registration.id)
            .execution_options(synchronize_session=False)
        ).rowcount
        if deleted != 1:
            raise NotRegistered("You are not registered for this tournament")
        db.expunge(registration)

        db.execute(
            update(Tournament)
            .where(Tournament.id == tournament_id, Tournament.current_players > 0)
            .values(current_players=Tournament.current_players - 1, updated_at=now)
            .execution_options(synchronize_session=False)
        )

        entry_fee = tournament.entry_fee or 0
        if entry_fee > 0:
            wallet_service.credit(
                db,
                user_uuid,
                entry_fee,
                type="refund",
                description=f"Tournament unregistration refund: {tournament.title}",
                reference_id=str(tournament.id),
                now=now,
            )

    logger.info("User %s unregistered from tournament %s (refund %s)", user_uuid, tournament_id, entry_fee)
    message = "Successfully unregistered from tournament"
    if entry_fee > 0:
        message += f" {_format_amount(entry_fee)} {settings.CURRENCY} refunded to your wallet"
    return {
        "success": True,
        "message": message,
        "refund_amount": float(entry_fee) if entry_fee > 0 else None,
    }
