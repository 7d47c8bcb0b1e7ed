from sqlalchemy import Column, Integer, String

from app.data.database import Base


class CredentialModel(Base):
    """Hasla dla lokalnego identity providera (bcrypt)."""

    __tablename__ = "credentials"

    id = Column(Integer, primary_key=True)
    auth_id = Column(String, nullable=False, unique=True)
    email = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
