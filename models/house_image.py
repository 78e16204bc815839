from extensions import db


class HouseImage(db.Model):
    __tablename__ = "house_images"

    id = db.Column(db.Integer, primary_key=True)
    house_id = db.Column(db.Integer, db.ForeignKey("houses.id", ondelete="CASCADE"), nullable=False)
    image_url = db.Column(db.String(255), nullable=False)

    house = db.relationship("House", back_populates="images")
