# backoffice/models/client_profile.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from backoffice.db import Base


class ClientProfile(Base):
    __tablename__ = "client_profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # identity issued by the auth layer (token subject)
    user_id: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), index=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    def __repr__(self) -> str:
        return f"<ClientProfile id={self.id} user={self.user_id!r} name={self.name!r}>"
