from models.db import db, epoch_seconds


class LoginAttempt(db.Model):
    __tablename__ = "login_attempts"

    id = db.Column(db.Integer, primary_key=True)

    ip_address = db.Column(db.String(64), nullable=False, index=True)

    # username is the honeypot field; legitimate clients always send ""
    username = db.Column(db.Text, nullable=True)
    password = db.Column(db.Text, nullable=True)

    timestamp = db.Column(db.Integer, default=epoch_seconds, nullable=False, index=True)
    success = db.Column(db.Boolean, default=False, nullable=False)
