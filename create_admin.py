import os

from app import create_app
from extensions import db
from models.user import User

app = create_app()

with app.app_context():
    email = os.getenv("ADMIN_EMAIL", "admin@example.com")
    existing_admin = User.query.filter_by(email=email).first()
    if existing_admin:
        print("⚠️ Admin account already exists!")
    else:
        admin = User(
            email=email,
            name="Admin",
            role="admin",
        )
        admin.set_password(os.getenv("ADMIN_PASSWORD", "admin123"))
        db.session.add(admin)
        db.session.commit()
        print("Admin account created successfully!")
