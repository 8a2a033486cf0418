from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, func
from settings.database import Base


class BaseModel(Base):
    __abstract__ = True

    created_on = Column(DateTime, server_default=func.now(), nullable=False)
    modified_on = Column(DateTime, server_default=func.now(), onupdate=datetime.utcnow, nullable=False)


class Employee(BaseModel):
    __tablename__ = 'employees'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    nip = Column(String(50), nullable=False, server_default='-')
    gol = Column(String(20), nullable=False)
    pangkat = Column(String(100), nullable=False, server_default='-')
    position = Column(String(255), nullable=False, server_default='-')
    sub_position = Column(String(255), nullable=False, server_default='-')
    organizational_level = Column(String(50), nullable=False)
    detailed_position = Column(String(255), nullable=False, server_default='Staff/Other')
