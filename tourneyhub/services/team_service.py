import logging
import secrets
import string
from typing import Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tourneyhub.core.database import atomic
from tourneyhub.core.errors import DuplicateName, Forbidden, NotFound, ValidationFailed
from tourneyhub.core.timeutils import epoch_now
from tourneyhub.models.team import Team, TeamMember
from tourneyhub.models.tournament import Game

logger = logging.getLogger(__name__)

INVITE_CODE_PREFIX = "TEAM_"
INVITE_CODE_LENGTH = 9
_INVITE_ALPHABET = string.digits + string.ascii_uppercase # base-36, upper case

DUPLICATE_TEAM_NAME = "A team with this name already exists"


def generate_invite_code() -> str:
    return INVITE_CODE_PREFIX + "".join(secrets.choice(_INVITE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))

def _clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if len(name) < 2:
        raise ValidationFailed("Team name must be at least 2 characters")
    return name

def _name_taken(db: Session, name: str, exclude_team_id: Optional[int] = None) -> bool:
    query = db.query(Team.id).filter(Team.name == name)
    if exclude_team_id is not None:
        query = query.filter(Team.id != exclude_team_id)
    return query.first() is not None

def _captain_membership(team: Team, captain_user_uuid: str, now: int) -> TeamMember:
    return TeamMember(team=team, user_uuid=captain_user_uuid, role="captain", joined_at=now)

def get_team(db: Session, team_id: int) -> Optional[Team]:
    return db.query(Team).filter(Team.id == team_id).first()

def get_members(db: Session, team_id: int) -> List[TeamMember]:
    # Oldest first, which puts the captain first for teams built by create_team
    return (
        db.query(TeamMember)
        .filter(TeamMember.team_id == team_id)
        .order_by(TeamMember.joined_at.asc(), TeamMember.id.asc())
        .all()
    )

def create_team(
    db: Session,
    name: str,
    game_id: Optional[int],
    captain_user_uuid: str,
    description: Optional[str] = None,
    tag: Optional[str] = None,
    now: Optional[int] = None,
) -> Team:
    """
    Creates a team together with its captain membership row.

    Both rows are committed in one transaction: if either insert fails
    neither exists afterwards.
    """
    name = _clean_name(name)
    if not game_id or game_id <= 0:
        raise ValidationFailed("Valid game ID required")
    if db.query(Game.id).filter(Game.id == game_id).first() is None:
        raise ValidationFailed("Invalid game")
    if _name_taken(db, name):
        raise DuplicateName(DUPLICATE_TEAM_NAME)

    now = now if now is not None else epoch_now()
    try:
        with atomic(db):
            team = Team(
                name=name,
                tag=(tag or "").strip(),
                description=(description or "").strip(),
                game_id=game_id,
                captain_user_uuid=captain_user_uuid,
                invite_code=generate_invite_code(),
                created_at=now,
                updated_at=now,
            )
            db.add(team)
            db.flush()
            db.add(_captain_membership(team, captain_user_uuid, now))
    except IntegrityError:
        # Lost a race against another team taking the same name
        raise DuplicateName(DUPLICATE_TEAM_NAME)

    db.refresh(team)
    logger.info("Team %s (%s) created with captain %s", team.id, team.name, captain_user_uuid)
    return team

def update_team(
    db: Session,
    team_id: int,
    caller_uuid: str,
    name: Optional[str],
    tag: Optional[str] = None,
    description: Optional[str] = None,
) -> Team:
    """Only the captain may edit a team; everyone else gets Forbidden and the row is left untouched."""
    try:
        with atomic(db):
            team = db.query(Team).filter(Team.id == team_id).with_for_update().first()
            if not team:
                raise NotFound("Team not found")
            if team.captain_user_uuid != caller_uuid:
                raise Forbidden("Only the team captain can update the team")
            name = _clean_name(name)
            if name != team.name and _name_taken(db, name, exclude_team_id=team.id):
                raise DuplicateName(DUPLICATE_TEAM_NAME)

            team.name = name
            team.tag = (tag or "").strip()
            team.description = (description or "").strip()
    except IntegrityError:
        raise DuplicateName(DUPLICATE_TEAM_NAME)

    db.refresh(team)
    logger.info("Team %s updated by captain %s", team_id, caller_uuid)
    return team

def delete_team(db: Session, team_id: int, caller_uuid: str) -> bool:
    with atomic(db):
        team = db.query(Team).filter(Team.id == team_id).with_for_update().first()
        if not team:
            raise NotFound("Team not found")
        if team.captain_user_uuid != caller_uuid:
            raise Forbidden("Only the team captain can delete the team")
        db.delete(team) # Membership rows go with it (delete-orphan cascade)
    logger.info("Team %s deleted by captain %s", team_id, caller_uuid)
    return True

def get_team_by_id(db: Session, team_id: int, caller_uuid: str) -> Dict:
    if not team_id or team_id <= 0:
        raise ValidationFailed("Valid team ID required")

    team = get_team(db, team_id)
    if not team:
        raise NotFound("Team not found")

    members = get_members(db, team_id)
    is_member = any(member.user_uuid == caller_uuid for member in members)
    if team.captain_user_uuid != caller_uuid and not is_member:
        raise Forbidden("You are not a member of this team")

    return {"team": team, "members": members}

def get_user_teams(db: Session, user_uuid: str) -> List[Team]:
    """Teams the user captains or belongs to, newest first."""
    member_of = db.query(TeamMember.team_id).filter(TeamMember.user_uuid == user_uuid)
    return (
        db.query(Team)
        .filter(or_(Team.captain_user_uuid == user_uuid, Team.id.in_(member_of)))
        .order_by(Team.created_at.desc(), Team.id.desc())
        .all()
    )
