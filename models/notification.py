from extensions import db


class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True)
    recipient_email = db.Column(db.String(100), nullable=False, index=True)
    template = db.Column(db.String(50), nullable=False)
    data = db.Column(db.JSON, default=dict)
    is_read = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
