from slowapi import Limiter
from slowapi.util import get_remote_address

from campusvote.core.settings import get_settings

# If later behind a proxy, parse X-Forwarded-For here.
limiter = Limiter(key_func=get_remote_address)


def login_limit() -> str:
    return get_settings().login_rate_limit
