from .passwords import hash_password, pwd_context
