from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from sqlalchemy.orm import Session

from .. import schemas, models
from ..deps import (
    get_db,
    get_password_hash,
    authenticate_user,
    create_access_token,
    get_current_user,
    is_admin,
)
from ..store import Collection

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", response_model=schemas.UserOut)
def register_user(user_in: schemas.UserCreate, db: Session = Depends(get_db)):
    """
    Register a new customer account.

    Parameters
    ----------
    user_in : UserCreate
        Username, email, optional display name and password.
    db : Session
        Database session.

    Raises
    ------
    HTTPException
        - 400 if the username or email already exists.
    """
    existing = db.query(models.User).filter(
        (models.User.username == user_in.username) | (models.User.email == user_in.email)
    ).first()
    if existing:
        raise HTTPException(status_code=400, detail="Username or email already exists")

    user = Collection(db, models.User).create(
        username=user_in.username,
        email=user_in.email,
        display_name=user_in.display_name,
        hashed_password=get_password_hash(user_in.password),
    )
    logger.info("Registered user {}", user.username)
    return user


@router.post("/login", response_model=schemas.Token, tags=["auth"])
def login_for_access_token(
    username: str,
    password: str,
    db: Session = Depends(get_db),
):
    """
    Authenticate a user and return a JWT access token.

    Raises
    ------
    HTTPException
        - 401 if credentials are invalid.
    """
    user = authenticate_user(db, username, password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
        )
    token = create_access_token({"sub": user.username})
    return {"access_token": token, "token_type": "bearer"}


@router.post("/logout", tags=["auth"])
def logout(current_user: models.User = Depends(get_current_user)):
    """
    End the current session.

    Tokens are stateless, so the client simply drops its token.
    """
    logger.info("User {} logged out", current_user.username)
    return {"detail": "Logged out"}


@router.get("/me", response_model=schemas.CurrentUserOut)
def read_current_user(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """Get the signed-in user, including whether they are an admin."""
    out = schemas.CurrentUserOut.model_validate(current_user)
    out.is_admin = is_admin(db, current_user.id)
    return out


@router.patch("/me", response_model=schemas.UserOut)
def update_current_user(
    user_update: schemas.UserUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    """
    Update the display name or email of the current user.

    Raises
    ------
    HTTPException
        - 400 if the new email belongs to another account.
    """
    data = user_update.model_dump(exclude_unset=True)
    if data.get("email") is None:
        data.pop("email", None)

    if "email" in data:
        taken = db.query(models.User).filter(
            models.User.email == data["email"], models.User.id != current_user.id
        ).first()
        if taken:
            raise HTTPException(status_code=400, detail="Email already in use")

    return Collection(db, models.User).update(current_user.id, **data)
