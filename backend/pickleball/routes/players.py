from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlmodel import Session, or_, select

from pickleball.database import get_session
from pickleball.models.player import Player

router = APIRouter()


class PlayerCreate(BaseModel):
    name: str
    email: str
    is_project_owner: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        v = (v or "").strip()
        if len(v) < 2:
            raise ValueError("name must be at least 2 characters")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        v = (v or "").strip().lower()
        local, _, domain = v.partition("@")
        if not local or "." not in domain:
            raise ValueError("email must be a valid address")
        return v


class PlayerResponse(BaseModel):
    id: int
    name: str
    email: str
    is_project_owner: bool
    created_at: datetime

    class Config:
        from_attributes = True


@router.post("/players", response_model=PlayerResponse, status_code=201)
def create_player(payload: PlayerCreate, session: Session = Depends(get_session)):
    """Create a player. Name and email are globally unique."""
    existing = session.exec(
        select(Player).where(or_(Player.name == payload.name, Player.email == payload.email))
    ).first()
    if existing:
        raise HTTPException(status_code=409, detail="A player with this name or email already exists")

    player = Player(**payload.model_dump())
    session.add(player)
    session.commit()
    session.refresh(player)
    return player


@router.get("/players", response_model=List[PlayerResponse])
def list_players(session: Session = Depends(get_session)):
    """List all players"""
    return session.exec(select(Player).order_by(Player.name)).all()


@router.get("/players/{player_id}", response_model=PlayerResponse)
def get_player(player_id: int, session: Session = Depends(get_session)):
    """Get a player by ID"""
    player = session.get(Player, player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return player
