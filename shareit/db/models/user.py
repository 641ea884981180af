from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from shareit.db.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(512), unique=True, index=True, nullable=False)
