from extensions import db


class Report(db.Model):
    __tablename__ = "reports"

    id = db.Column(db.Integer, primary_key=True)
    reporter_email = db.Column(db.String(100), nullable=False)
    target_house_id = db.Column(db.Integer, db.ForeignKey("houses.id", ondelete="SET NULL"))
    target_email = db.Column(db.String(100))

    report_type = db.Column(db.String(50), nullable=False)
    details = db.Column(db.Text)

    status = db.Column(
        db.Enum("pending", "resolved", "dismissed", name="report_status"),
        default="pending"
    )
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    target_house = db.relationship("House", back_populates="reports")
