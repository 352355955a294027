# foodcourt/data/seed.py
from decimal import Decimal

from foodcourt.data.database import Base, SessionLocal, engine
from foodcourt.data.models import MenuItemModel, StallModel, UserModel


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(UserModel).first():
            return

        owner = UserModel(name="Court Owner", email="owner@foodcourt.local", role="FoodCourtOwner")
        vendor = UserModel(name="Stall Vendor", email="vendor@foodcourt.local", role="StallOwner")
        customer = UserModel(name="Customer", email="customer@foodcourt.local", role="Customer")
        db.add_all([owner, vendor, customer])
        db.flush()

        stall = StallModel(owner_id=vendor.id, name="Burger Hut", category="Fast Food", rent=Decimal("500.00"))
        db.add(stall)
        db.flush()

        db.add_all([
            MenuItemModel(stall_id=stall.id, name="Classic Burger", category="Burger", price=Decimal("5.00"), stock=20),
            MenuItemModel(stall_id=stall.id, name="Fries", category="Sides", price=Decimal("3.00"), stock=50),
        ])
        db.commit()
    finally:
        db.close()


if __name__ == "__main__":
    seed()
