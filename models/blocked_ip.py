from models.db import db


class BlockedIp(db.Model):
    __tablename__ = "blocked_ips"

    ip_address = db.Column(db.String(64), primary_key=True)
    blocked_until = db.Column(db.Integer, nullable=False)  # epoch seconds
