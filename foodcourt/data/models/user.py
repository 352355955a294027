from sqlalchemy import Column, Integer, String
from foodcourt.data.database import Base

class UserModel(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    role = Column(String, nullable=False, default="Customer")  # Customer, StallOwner, FoodCourtOwner
