"""Login and current-user endpoints for Outline Deck users."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from deck_backend.app.core.errors import NoteTreeError
from deck_backend.app.core.security import create_access_token, verify_password
from deck_backend.app.db.session import get_db
from deck_backend.app.dependencies.auth import get_current_user
from deck_backend.app.dependencies.tree import http_error
from deck_backend.app.models.project import Project
from deck_backend.app.models.user import User
from deck_backend.app.schemas.user import (
    LastProjectRead,
    LastProjectUpdate,
    LoginRequest,
    TokenResponse,
    UserRead,
)
from deck_backend.app.services import projects as project_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == credentials.email).first()
    if not user or not user.hashed_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is inactive")
    if not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")

    token = create_access_token(user_id=user.id)
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get("/me/last-project", response_model=LastProjectRead)
def read_last_project(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    project_id = current_user.last_opened_project_id
    # Stale once the project is deleted
    if project_id is not None:
        exists = db.query(Project.id).filter(Project.id == project_id, Project.owner_id == current_user.id).first()
        if not exists:
            project_id = None
    return {"project_id": project_id}


@router.put("/me/last-project", response_model=LastProjectRead)
def update_last_project(
    last_in: LastProjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if last_in.project_id is not None:
        try:
            project_service.get_owned_project(db, last_in.project_id, current_user.id)
        except NoteTreeError as exc:
            raise http_error(exc) from exc
    current_user.last_opened_project_id = last_in.project_id
    db.commit()
    return {"project_id": current_user.last_opened_project_id}
