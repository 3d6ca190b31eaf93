"""Models for the accounts example."""

from typing import Any, Optional

from sqlalchemy import String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    api_token: Mapped[Optional[str]] = mapped_column(Text, info={"transformer": "vault"})
    # Holds a dict in Python and JSON text in the table. Reassign the dict
    # (or use flag_modified) after changing it; in-place edits are not
    # tracked by the session.
    settings: Mapped[Optional[Any]] = mapped_column(Text, info={"transformer": "payload"})


class Note:
    """Plain object, transformed directly through the coordinator."""

    def __init__(self, body: str):
        self.body = body
