from models.db_storage import DBStorage
from models.user import User
from models.user_repository import ANY, UserRepository

__all__ = ["ANY", "DBStorage", "User", "UserRepository"]
