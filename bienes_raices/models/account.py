"""Account model."""

from sqlalchemy import Boolean, Column, Integer, String, false

from bienes_raices.database import Base
from bienes_raices.models.mixins import TimestampMixin

NAME_MAX_LENGTH = 60


class Account(Base, TimestampMixin):
    """A registered user of the site.

    ``pending_token`` holds the single-use token of whichever action is in
    flight (email confirmation or password reset) and is NULL otherwise.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    confirmed = Column(Boolean, nullable=False, default=False, server_default=false())
    pending_token = Column(String(64), unique=True, nullable=True, index=True)
