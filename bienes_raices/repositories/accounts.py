"""Persistence boundary for accounts.

Every method takes and returns ``AccountRecord`` snapshots; ORM instances
never leave this module. Token redemption is a single conditional UPDATE so
two requests racing on the same token cannot both succeed.
"""

import logging

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bienes_raices.models.account import Account
from bienes_raices.schemas.auth import AccountRecord

logger = logging.getLogger(__name__)


class AccountRepository:
    """SQLAlchemy-backed account storage."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, account_id: int) -> AccountRecord | None:
        account = self.db.query(Account).filter(Account.id == account_id).first()
        return self._to_record(account)

    def find_by_email(self, email: str) -> AccountRecord | None:
        account = (
            self.db.query(Account).filter(func.lower(Account.email) == email.lower()).first()
        )
        return self._to_record(account)

    def find_by_token(self, token: str) -> AccountRecord | None:
        if not token:
            return None
        account = self.db.query(Account).filter(Account.pending_token == token).first()
        return self._to_record(account)

    def create(
        self, name: str, email: str, password_hash: str, pending_token: str
    ) -> AccountRecord | None:
        """Insert an unconfirmed account.

        Returns None when the email is already taken.
        """
        account = Account(
            name=name,
            email=email.lower(),
            password_hash=password_hash,
            confirmed=False,
            pending_token=pending_token,
        )
        self.db.add(account)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info("Duplicate registration rejected")
            return None
        self.db.refresh(account)
        return self._to_record(account)

    def set_pending_token(self, account_id: int, token: str) -> AccountRecord | None:
        """Store a fresh action token; no other column is written."""
        self.db.execute(
            update(Account).where(Account.id == account_id).values(pending_token=token)
        )
        self.db.commit()
        return self.find_by_id(account_id)

    def confirm_by_token(self, token: str) -> AccountRecord | None:
        """Mark the token holder confirmed and clear the token, if it still matches."""
        return self._redeem_token(token, confirmed=True)

    def reset_password_by_token(self, token: str, password_hash: str) -> AccountRecord | None:
        """Replace the password and clear the token, if it still matches."""
        return self._redeem_token(token, password_hash=password_hash)

    def _redeem_token(self, token: str, **values) -> AccountRecord | None:
        if not token:
            return None
        holder = self.db.query(Account.id).filter(Account.pending_token == token).first()
        if holder is None:
            return None

        (account_id,) = holder
        result = self.db.execute(
            update(Account)
            .where(Account.id == account_id, Account.pending_token == token)
            .values(pending_token=None, **values)
        )
        self.db.commit()
        if result.rowcount != 1:
            # Another request redeemed it between the lookup and the update
            return None
        return self.find_by_id(account_id)

    def _to_record(self, account: Account | None) -> AccountRecord | None:
        if account is None:
            return None
        return AccountRecord.model_validate(account)
