from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


class PasslibPasswordHasher:
    """Password hashing through passlib's argon2 scheme."""

    def hash_password(self, password: str) -> str:
        result: str = pwd_context.hash(password)
        return result

    def verify_password(self, plain: str, hashed: str) -> bool:
        result: bool = pwd_context.verify(plain, hashed)
        return result
