class JWTError(Exception):
    """Base class for every error raised by pkg_jwt."""
    pass


class InvalidTokenError(JWTError):
    """Raised when a token is rejected during decoding."""
    pass


class MalformedTokenError(InvalidTokenError):
    """Raised when a token is not three base64url segments of valid JSON."""
    pass


class InvalidSignatureError(InvalidTokenError):
    """Raised when signature verification fails, for any reason."""
    pass


class InvalidAlgorithmError(InvalidTokenError):
    """Raised when the header `alg` does not match the verifying signer."""
    pass


class UnsupportedAlgorithmError(JWTError):
    """Raised for an algorithm name or key combination outside the supported set."""
    pass


class InvalidKeyError(JWTError):
    """Raised when key material is malformed or does not fit the algorithm."""
    pass
