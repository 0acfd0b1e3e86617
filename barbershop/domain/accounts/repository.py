"""Account repository - Database operations for accounts"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import DuplicateEmail, StoreError
from ...models import Account

logger = logging.getLogger(__name__)


class AccountRepository:
    """Repository for account database operations"""

    @staticmethod
    def _commit(db: Session) -> None:
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Account update failed: {e}")
            raise StoreError() from e

    @staticmethod
    def create(db: Session, name: str, email: str, password_hash: str) -> Account:
        """Create a new account; the unique email constraint decides duplicates"""
        account = Account(name=name, email=email, password_hash=password_hash)
        db.add(account)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise DuplicateEmail() from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Failed to create account: {e}")
            raise StoreError() from e
        db.refresh(account)
        return account

    @staticmethod
    def find_by_email(db: Session, email: str) -> Optional[Account]:
        """Get account by email"""
        return db.query(Account).filter(Account.email == email).first()

    @staticmethod
    def set_reset_token(db: Session, account: Account, token: str, expiry: datetime) -> None:
        """Store a password reset token together with its expiry"""
        account.reset_token = token
        account.reset_token_expiry = expiry
        AccountRepository._commit(db)

    @staticmethod
    def find_by_reset_token(db: Session, token: str) -> Optional[Account]:
        """Get account by reset token regardless of expiry"""
        return db.query(Account).filter(Account.reset_token == token).first()

    @staticmethod
    def find_by_valid_reset_token(db: Session, token: str, now: datetime) -> Optional[Account]:
        """Get account by reset token, only while the token has not expired"""
        return (
            db.query(Account)
            .filter(Account.reset_token == token, Account.reset_token_expiry > now)
            .first()
        )

    @staticmethod
    def consume_reset_token(db: Session, account: Account, new_password_hash: str) -> None:
        """Replace the password hash and clear both token fields"""
        account.password_hash = new_password_hash
        account.reset_token = None
        account.reset_token_expiry = None
        AccountRepository._commit(db)

    @staticmethod
    def clear_reset_token(db: Session, account: Account) -> None:
        account.reset_token = None
        account.reset_token_expiry = None
        AccountRepository._commit(db)
