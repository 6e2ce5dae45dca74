from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from dealership.schemas import token_schemas, user_schemas
from dealership.data_access import user_repo
from dealership.db.session import get_db
from dealership.core import security
from dealership.api import dependencies
from dealership import models

router = APIRouter()

@router.post("/login", response_model=token_schemas.TokenSchema)
def login_for_access_token(
    *,
    db: Session = Depends(get_db),
    login_data: token_schemas.LoginRequestSchema
):
    """
    Login to get an access token.
    """
    user = user_repo.authenticate(db, username=login_data.username, password=login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
        )
    if not user.is_active:  # type: ignore
        raise HTTPException(status_code=400, detail="Inactive user")

    access_token = security.create_access_token(subject=user.id)  # type: ignore
    return {"access_token": access_token, "token_type": "Bearer"}


@router.get("/users/me", response_model=user_schemas.UserReadSchema)
def read_users_me(
    current_user: models.User = Depends(dependencies.get_current_active_user)
):
    return current_user
