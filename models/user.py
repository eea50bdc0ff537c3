from models.base_model import Base, BaseModel
from sqlalchemy import Column, String, Text


class User(BaseModel, Base):
    __tablename__ = "users"
    username = Column(String(64), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    full_name = Column(String(255), nullable=True)
    # Profile media references; stored as given, never touched by the token core
    avatar = Column(String(1024), nullable=True)
    cover_image = Column(String(1024), nullable=True)
    password_hash = Column(String(255), nullable=False)
    # The only refresh token currently accepted for this user (NULL when logged out)
    refresh_token = Column(Text, nullable=True)

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")
