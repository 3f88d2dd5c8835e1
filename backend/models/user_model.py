# backend/models/user_model.py
from sqlalchemy import Column, Integer, Boolean, DateTime, func
from sqlalchemy.types import Unicode, UnicodeText
from database.session import Base

class User(Base):
    __tablename__ = "users"
    id         = Column(Integer, primary_key=True, index=True)
    email      = Column(Unicode(255), unique=True, nullable=False, index=True)
    password   = Column(Unicode(255))  # hash, managed by the auth service
    first_name = Column(Unicode(100))
    last_name  = Column(Unicode(100))
    phone      = Column(Unicode(20), index=True)
    whatsapp   = Column(Unicode(20))
    address    = Column(UnicodeText)
    is_admin   = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
