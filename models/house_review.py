from extensions import db


class HouseReview(db.Model):
    __tablename__ = "house_reviews"

    id = db.Column(db.Integer, primary_key=True)
    house_id = db.Column(db.Integer, db.ForeignKey("houses.id", ondelete="CASCADE"), nullable=False)
    user_email = db.Column(
        db.String(100), db.ForeignKey("users.email", ondelete="CASCADE"), nullable=False
    )
    rating = db.Column(db.Integer, nullable=False)  # 1-5
    comment = db.Column(db.String(1000))
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    house = db.relationship("House", back_populates="reviews")
    user = db.relationship("User", back_populates="reviews")
