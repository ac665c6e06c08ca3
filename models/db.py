import time
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def epoch_seconds() -> int:
    return int(time.time())
