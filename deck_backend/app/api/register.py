"""Handles user registration for Outline Deck."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from deck_backend.app.core.security import get_password_hash
from deck_backend.app.db.base import Base
from deck_backend.app.db.session import engine, get_db
from deck_backend.app.models.user import User
from deck_backend.app.schemas.user import UserCreate, UserRead

Base.metadata.create_all(bind=engine)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)):
    existing = db.query(User).filter(User.email == user_in.email).first()
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")
    hashed_password = get_password_hash(user_in.password)  # Hash password before storing
    user = User(email=user_in.email, hashed_password=hashed_password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
