from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func
from jobboard.database import Base
import uuid


class Member(Base):
    """
    Organization member. Members see full postings and may apply.

    Attributes:
        email: Lower-cased sign-in email (unique)
        subscribed_to_job_alerts: Receives an email when a posting is approved
    """

    __tablename__ = "members"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    first_name = Column(String(200), nullable=False, default="")
    last_name = Column(String(200), nullable=False, default="")
    email = Column(String(320), nullable=False, unique=True, index=True)
    phone = Column(String(50), nullable=True, index=True)
    subscribed_to_job_alerts = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())
