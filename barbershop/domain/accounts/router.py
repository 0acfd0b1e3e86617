"""Account router - FastAPI endpoints for registration, login and password reset"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...rate_limiter import create_rate_limiter
from .schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    ResetPasswordRequest,
)
from .service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Accounts"])

# Rate limiters
rate_limit_login = create_rate_limiter(limit=20, window_seconds=900, key_prefix="login")
rate_limit_forgot_password = create_rate_limiter(
    limit=5,
    window_seconds=3600,  # 1 hour
    key_prefix="forgot_password",
)


def get_account_service(
    background_tasks: BackgroundTasks, db: Session = Depends(get_db)
) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db, background_tasks)


@router.post("/cadastro", response_model=MessageResponse, status_code=201)
async def register(data: RegisterRequest, service: AccountService = Depends(get_account_service)):
    service.register(data.name, data.email, data.password)
    return MessageResponse(message="Usuário cadastrado com sucesso! 👤")


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(rate_limit_login),
):
    profile = service.login(data.email, data.password)
    return LoginResponse(message="Login realizado com sucesso! ✅", user=profile)


@router.post("/esqueci-senha", response_model=MessageResponse)
async def forgot_password(
    data: ForgotPasswordRequest,
    service: AccountService = Depends(get_account_service),
    _: None = Depends(rate_limit_forgot_password),
):
    """Issue a reset token and email the reset link - Rate limited to 5 requests per hour per IP"""
    service.request_password_reset(data.email)
    return MessageResponse(message="Enviamos um link de redefinição para o seu e-mail.")


@router.post("/resetar-senha", response_model=MessageResponse)
async def reset_password(
    data: ResetPasswordRequest, service: AccountService = Depends(get_account_service)
):
    service.reset_password(data.token, data.newPassword)
    return MessageResponse(message="Senha redefinida com sucesso!")
