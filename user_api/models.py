from sqlalchemy import Column, Integer, String

from .database import Base


class User(Base):
    """The only entity: an auto-assigned id plus a name and an age.

    Age has no range check here; whatever integer the client sends is stored.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    age = Column(Integer, nullable=False)
