from sqlalchemy import select
from sqlalchemy.orm import Session

from app.data.models.credential import CredentialModel


class CredentialRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> CredentialModel | None:
        return self.db.execute(
            select(CredentialModel).where(CredentialModel.email == email)
        ).scalar_one_or_none()

    def create(self, credential: CredentialModel) -> CredentialModel:
        self.db.add(credential)
        self.db.commit()
        return credential
