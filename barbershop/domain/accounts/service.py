"""Account service - Registration, login and password reset"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlencode

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from ...config import FRONTEND_URL, RESET_TOKEN_TTL_MINUTES
from ...email_service import send_password_reset_email, send_welcome_email
from ...errors import AccountNotFound, InvalidCredentials, InvalidOrExpiredToken
from ...models import Account
from ...security_utils import (
    generate_secure_token,
    hash_password_bcrypt,
    mask_email,
    verify_password_bcrypt,
)
from .repository import AccountRepository
from .schemas import PublicProfile

logger = logging.getLogger(__name__)


class AccountService:
    """Service layer for account business logic"""

    def __init__(self, db: Session, background_tasks: Optional[BackgroundTasks] = None):
        self.db = db
        self.background_tasks = background_tasks if background_tasks is not None else BackgroundTasks()
        self.repo = AccountRepository()

    def register(self, name: str, email: str, password: str) -> Account:
        """Create an account; raises DuplicateEmail when the email is taken"""
        account = self.repo.create(self.db, name=name, email=email, password_hash=hash_password_bcrypt(password))
        logger.info(f"👤 Account {account.id} created for {mask_email(email)}")
        self.background_tasks.add_task(send_welcome_email, to=account.email, user_name=account.name)
        return account

    def login(self, email: str, password: str) -> PublicProfile:
        account = self.repo.find_by_email(self.db, email)
        if not account:
            raise AccountNotFound()
        if not verify_password_bcrypt(password, account.password_hash):
            logger.warning(f"⚠️ Wrong password for {mask_email(email)}")
            raise InvalidCredentials()
        return PublicProfile(name=account.name, email=account.email)

    def request_password_reset(self, email: str, now: Optional[datetime] = None) -> str:
        """
        Issue a reset token valid for RESET_TOKEN_TTL_MINUTES and schedule the
        reset-link email. Returns the token.
        """
        now = now or datetime.now(timezone.utc).replace(tzinfo=None)
        account = self.repo.find_by_email(self.db, email)
        if not account:
            raise AccountNotFound()

        token = generate_secure_token(32)
        expiry = now + timedelta(minutes=RESET_TOKEN_TTL_MINUTES)
        self.repo.set_reset_token(self.db, account, token, expiry)
        logger.info(f"🔑 Reset token issued for {mask_email(email)} (expires {expiry.isoformat()})")

        reset_link = f"{FRONTEND_URL}/resetar-senha?{urlencode({'token': token})}"
        self.background_tasks.add_task(send_password_reset_email, to=account.email, reset_link=reset_link)
        return token

    def reset_password(self, token: str, new_password: str, now: Optional[datetime] = None) -> None:
        now = now or datetime.now(timezone.utc).replace(tzinfo=None)
        account = self.repo.find_by_valid_reset_token(self.db, token, now)
        if not account:
            expired = self.repo.find_by_reset_token(self.db, token)
            if expired:
                logger.info(f"Reset token for {mask_email(expired.email)} expired; clearing it")
                self.repo.clear_reset_token(self.db, expired)
            raise InvalidOrExpiredToken()

        self.repo.consume_reset_token(self.db, account, hash_password_bcrypt(new_password))
        logger.info(f"✅ Password reset for {mask_email(account.email)}")
