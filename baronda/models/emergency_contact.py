from sqlalchemy import Column, String

from baronda.core.database import Base


class EmergencyContact(Base):
    __tablename__ = "emergency_contacts"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    number = Column(String(32), nullable=False)
    type = Column(String(20), nullable=False, default="other")  # police, fire, medical, other
