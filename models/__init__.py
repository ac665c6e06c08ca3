from .db import db
from .login_attempt import LoginAttempt
from .blocked_ip import BlockedIp
from .auth_token import AuthToken
