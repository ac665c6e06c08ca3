from models.db import db, epoch_seconds


class AuthToken(db.Model):
    __tablename__ = "auth_tokens"

    token = db.Column(db.String(128), primary_key=True)
    created_at = db.Column(db.Integer, default=epoch_seconds, nullable=False)
