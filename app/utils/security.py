import bcrypt

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72

def password_bytes(password: str) -> bytes:
    """UTF-8 bytes of a password, cut to what bcrypt reads"""
    return password.encode()[:MAX_PASSWORD_BYTES]

def hash_password(password: str, rounds: int = 10) -> str:
    """Salted one-way hash of a password using bcrypt"""
    return bcrypt.hashpw(password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode()
