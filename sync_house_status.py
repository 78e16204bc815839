from app import create_app
from services import house_status

if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        print("🔄 Recomputing house availability from bookings...")

        for house in house_status.recompute_all():
            print(f" - #{house.id} {house.room_name} | {house.address}: {house.status}")

        print("✅ House availability synced!")
