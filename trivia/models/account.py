from sqlalchemy import Column, Integer, String

from trivia.core.db import Base


class Account(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True, nullable=False)
    # 单向摘要后的密码，从不保存明文
    password = Column(String, nullable=False)
    xp = Column(Integer, default=0, server_default="0")
