import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tourneyhub.api.dependencies import get_db
from tourneyhub.core.errors import InternalError, TourneyError, ValidationFailed
from tourneyhub.schemas import auth_schemas, team_schemas
from tourneyhub.services import auth_service, team_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_team_by_id(db: Session, request: team_schemas.TeamActionRequest, caller: str):
    result = team_service.get_team_by_id(db, request.team_id or 0, caller)
    return team_schemas.TeamDetailResponse(
        team=team_schemas.TeamRead.model_validate(result["team"]),
        members=[team_schemas.TeamMemberRead.model_validate(m) for m in result["members"]],
    )

def _get_user_teams(db: Session, request: team_schemas.TeamActionRequest, caller: str):
    teams = team_service.get_user_teams(db, request.user_uuid or caller)
    return team_schemas.TeamListResponse(teams=[team_schemas.TeamRead.model_validate(t) for t in teams])

def _create(db: Session, request: team_schemas.TeamActionRequest, caller: str):
    # The caller always becomes the captain
    team = team_service.create_team(
        db,
        name=request.name,
        game_id=request.game_id,
        captain_user_uuid=caller,
        description=request.description,
        tag=request.tag,
    )
    return team_schemas.TeamCreatedResponse(team=team_schemas.TeamCreatedRead.model_validate(team))

def _update_team(db: Session, request: team_schemas.TeamActionRequest, caller: str):
    if not request.team_id:
        raise ValidationFailed("Team ID is required")
    team = team_service.update_team(
        db, request.team_id, caller, name=request.name, tag=request.tag, description=request.description
    )
    return {"success": True, "message": "Team updated successfully", "team": team_schemas.TeamRead.model_validate(team)}

def _delete_team(db: Session, request: team_schemas.TeamActionRequest, caller: str):
    if not request.team_id:
        raise ValidationFailed("Team ID is required")
    team_service.delete_team(db, request.team_id, caller)
    return {"success": True, "message": "Team deleted successfully"}

ACTIONS = {
    "get_team_by_id": _get_team_by_id,
    "get_user_teams": _get_user_teams,
    "create": _create,
    "update_team": _update_team,
    "delete_team": _delete_team,
}

@router.post("")
def team_action_endpoint(
    request: team_schemas.TeamActionRequest,
    db: Session = Depends(get_db),
    current_user: auth_schemas.CurrentUser = Depends(auth_service.get_current_user),
):
    handler = ACTIONS.get(request.action)
    if handler is None:
        raise ValidationFailed("Invalid action")

    try:
        return handler(db, request, current_user.uuid)
    except TourneyError:
        raise
    except Exception:
        logger.exception("Team action %s by %s failed", request.action, current_user.uuid)
        raise InternalError("Operation failed")
