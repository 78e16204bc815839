import random
from datetime import date, timedelta
from decimal import Decimal

from app import create_app
from extensions import db
from models import User, House, HouseImage
from services import bookings, payments
from services.errors import RentalError

# ====== CONFIG ======
NUM_OWNERS = 5
NUM_TENANTS = 15
HOUSES_PER_OWNER = 3
BOOKING_ATTEMPTS = 60
ROOM_TYPES = ["Studio", "Apartment", "Condo", "Terrace", "Bungalow"]
FURNISHING = ["Fully furnished", "Partially furnished", "Unfurnished"]
STREETS = ["Jalan Ampang", "Jalan Bukit Bintang", "Jalan Tun Razak", "Jalan Genting Klang", "Jalan Klang Lama"]
# =====================


def random_window(today):
    start = today + timedelta(days=random.randint(0, 20))
    return start, start + timedelta(days=random.randint(20, 90))


def create_users():
    print("👤 Creating owners and tenants...")

    owners, tenants = [], []
    for i in range(1, NUM_OWNERS + 1):
        u = User(email=f"owner{i}@example.com", name=f"Owner {i}", role="owner",
                 photo_url=f"photos/owner{i}.jpg")
        u.set_password("123456")
        owners.append(u)
    for i in range(1, NUM_TENANTS + 1):
        u = User(email=f"tenant{i}@example.com", name=f"Tenant {i}", role="tenant",
                 photo_url=f"photos/tenant{i}.jpg")
        u.set_password("123456")
        tenants.append(u)

    db.session.add_all(owners + tenants)
    db.session.commit()
    print(f"✅ Created {len(owners)} owners and {len(tenants)} tenants.")
    return owners, tenants


def create_houses(owners):
    print("🏠 Creating houses...")

    today = date.today()
    houses = []
    for owner in owners:
        for _ in range(HOUSES_PER_OWNER):
            start, end = random_window(today)
            house = House(
                owner_email=owner.email,
                room_name=f"{random.choice(ROOM_TYPES)} near {random.choice(STREETS)}",
                room_type=random.choice(ROOM_TYPES),
                address=f"{random.randint(1, 300)}, {random.choice(STREETS)}",
                rooms=random.randint(1, 5),
                bathrooms=random.randint(1, 3),
                furnishing=random.choice(FURNISHING),
                sqft=random.randint(400, 2500),
                price=Decimal(random.randint(60, 400)),
                start_date=start,
                end_date=end,
            )
            houses.append(house)

    db.session.add_all(houses)
    db.session.flush()
    for house in houses:
        db.session.add(HouseImage(house_id=house.id, image_url=f"/static/img/house/{house.id}/cover.jpg"))
    db.session.commit()
    print(f"✅ Created {len(houses)} houses.")
    return houses


def create_bookings(houses, tenants):
    print("📦 Creating bookings and payments...")

    created = conflicts = 0
    for _ in range(BOOKING_ATTEMPTS):
        house = random.choice(houses)
        tenant = random.choice(tenants)
        span = (house.end_date - house.start_date).days
        start = house.start_date + timedelta(days=random.randint(0, span))
        end = min(start + timedelta(days=random.randint(0, 10)), house.end_date)
        try:
            booking = bookings.create_booking(house.id, tenant.email, start, end)
        except RentalError:
            conflicts += 1
            continue
        created += 1

        method = random.choice(["card", "bank_transfer", "cash", "qr_code", None])
        if method:
            payments.record_payment_method(booking.id, method)

    print(f"✅ Created {created} bookings ({conflicts} attempts hit a date conflict).")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        print("🚀 Generating demo data...\n")

        db.create_all()
        owners, tenants = create_users()
        houses = create_houses(owners)
        create_bookings(houses, tenants)

        print("\n🎉 Demo data ready!")
