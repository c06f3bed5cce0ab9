"""Question model."""

from sqlalchemy import CheckConstraint, Column, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin

SPATIAL_INDEX_NAME = "ix_questions_latitude_longitude"


class Question(Base, TimestampMixin):
    """A question pinned to a geo-point."""

    __tablename__ = "questions"
    __table_args__ = (
        Index(SPATIAL_INDEX_NAME, "latitude", "longitude"),
        CheckConstraint("like_count >= 0", name="ck_questions_like_count_non_negative"),
        CheckConstraint("longitude >= -180 AND longitude <= 180", name="ck_questions_longitude"),
        CheckConstraint("latitude >= -90 AND latitude <= 90", name="ck_questions_latitude"),
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    longitude = Column(Float, nullable=False)
    latitude = Column(Float, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    like_count = Column(Integer, nullable=False, default=0, server_default="0")
    answer_count = Column(Integer, nullable=False, default=0, server_default="0")

    # Relationships
    author = relationship("User", back_populates="questions")
    # Only answers that have been attached to the question's answer list
    answers = relationship(
        "Answer",
        primaryjoin="and_(Question.id == Answer.question_id, Answer.position.isnot(None))",
        order_by="Answer.position",
        viewonly=True,
    )

    @property
    def answer_ids(self) -> list[int]:
        return [answer.id for answer in self.answers]

    @property
    def location(self) -> dict:
        """GeoJSON point, longitude first."""
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}
