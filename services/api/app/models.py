"""SQLAlchemy ORM models for the questions service."""

from sqlalchemy import Column, DateTime, Integer, String, Text, func
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Attributes clients may mass-assign.
QUESTION_ATTRIBUTES = ("title", "body")


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def validation_errors(self) -> list[str]:
        """Return presence errors for required fields (empty when valid)."""
        errors = []
        for name in QUESTION_ATTRIBUTES:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                errors.append(f"{name.capitalize()} can't be blank")
        return errors

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "body": self.body,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self) -> str:
        return f"<Question id={self.id} title={self.title!r}>"
