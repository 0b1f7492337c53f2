import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from tourneyhub.api.dependencies import get_db
from tourneyhub.core.config import settings
from tourneyhub.core.errors import InternalError, TourneyError
from tourneyhub.models import user as user_model
from tourneyhub.schemas import auth_schemas, registration_schemas, tournament_schemas
from tourneyhub.services import auth_service, tournament_service

logger = logging.getLogger(__name__)

router = APIRouter()

# Fixed paths first so they never match as a tournament id

@router.post("/join", response_model=registration_schemas.JoinResponse)
def join_tournament_endpoint(
    join_in: registration_schemas.JoinRequest,
    db: Session = Depends(get_db),
    current_user: auth_schemas.CurrentUser = Depends(auth_service.get_current_user),
):
    try:
        return tournament_service.join_tournament(
            db=db, tournament_id=join_in.tournament_id, user_uuid=current_user.uuid, team_id=join_in.team_id
        )
    except TourneyError:
        raise
    except Exception:
        logger.exception("Join of tournament %s by %s failed", join_in.tournament_id, current_user.uuid)
        raise InternalError("Failed to register for tournament")

@router.post("/unregister", response_model=registration_schemas.UnregisterResponse)
def unregister_endpoint(
    unregister_in: registration_schemas.UnregisterRequest,
    db: Session = Depends(get_db),
    current_user: auth_schemas.CurrentUser = Depends(auth_service.get_current_user),
):
    try:
        return tournament_service.unregister_from_tournament(
            db=db, tournament_id=unregister_in.tournament_id, user_uuid=current_user.uuid
        )
    except TourneyError:
        raise
    except Exception:
        logger.exception("Unregister from tournament %s by %s failed", unregister_in.tournament_id, current_user.uuid)
        raise InternalError("Failed to unregister from tournament")

@router.get("", response_model=tournament_schemas.TournamentListResponse)
def list_tournaments_endpoint(
    status_filter: Optional[str] = Query(None, alias="status"),
    game: Optional[str] = None,
    limit: int = settings.DEFAULT_PAGE_LIMIT,
    offset: int = 0,
    db: Session = Depends(get_db),
    current_user: Optional[auth_schemas.CurrentUser] = Depends(auth_service.get_optional_user),
):
    limit = max(1, min(limit, settings.MAX_PAGE_LIMIT))
    offset = max(0, offset)
    try:
        user = auth_service.get_user_record(db, current_user)
        tournaments, total = tournament_service.list_tournaments(
            db,
            status=status_filter,
            game=game,
            limit=limit,
            offset=offset,
            include_drafts=bool(user and user.is_admin),
        )
    except TourneyError:
        raise
    except Exception:
        logger.exception("Listing tournaments failed")
        raise InternalError("Failed to fetch tournaments")

    return tournament_schemas.TournamentListResponse(
        tournaments=[tournament_schemas.TournamentRead.model_validate(t) for t in tournaments],
        pagination=tournament_schemas.Pagination(
            total=total, limit=limit, offset=offset, hasMore=offset + limit < total
        ),
    )

@router.post("", response_model=tournament_schemas.TournamentResponse, status_code=status.HTTP_201_CREATED)
def create_tournament_endpoint(
    tournament_in: tournament_schemas.TournamentCreate,
    db: Session = Depends(get_db),
    admin: user_model.User = Depends(auth_service.require_admin),
):
    try:
        tournament = tournament_service.create_tournament(db=db, tournament=tournament_in, creator_id=admin.id)
    except TourneyError:
        raise
    except Exception:
        logger.exception("Creating tournament %r failed", tournament_in.title)
        raise InternalError("Failed to create tournament")
    return {"success": True, "message": "Tournament created successfully", "tournament": tournament}

@router.get("/{tournament_id}", response_model=tournament_schemas.TournamentDetailResponse)
def get_tournament_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[auth_schemas.CurrentUser] = Depends(auth_service.get_optional_user),
):
    try:
        details = tournament_service.get_tournament_details(
            db,
            tournament_id,
            user=auth_service.get_user_record(db, current_user),
            user_uuid=current_user.uuid if current_user else None,
        )
    except TourneyError:
        raise
    except Exception:
        logger.exception("Fetching tournament %s failed", tournament_id)
        raise InternalError("Failed to fetch tournament details")
    return {"success": True, "tournament": details}

@router.post("/{tournament_id}/status", response_model=tournament_schemas.TournamentResponse)
def update_tournament_status_endpoint(
    tournament_id: int,
    status_in: tournament_schemas.TournamentStatusUpdate,
    db: Session = Depends(get_db),
    admin: user_model.User = Depends(auth_service.require_admin),
):
    try:
        tournament = tournament_service.update_tournament_status(db, tournament_id, status_in.status)
    except TourneyError:
        raise
    except Exception:
        logger.exception("Status change of tournament %s by %s failed", tournament_id, admin.id)
        raise InternalError("Failed to update tournament status")
    return {"success": True, "message": f"Tournament status updated to {tournament.status}", "tournament": tournament}

@router.delete("/{tournament_id}")
def delete_tournament_endpoint(
    tournament_id: int,
    db: Session = Depends(get_db),
    admin: user_model.User = Depends(auth_service.require_admin),
):
    try:
        tournament_service.delete_tournament(db, tournament_id)
    except TourneyError:
        raise
    except Exception:
        logger.exception("Deleting tournament %s by %s failed", tournament_id, admin.id)
        raise InternalError("Failed to delete tournament")
    return {"success": True, "message": "Tournament deleted successfully"}
