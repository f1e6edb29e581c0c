"""
Secrets random source adapter - Implements RandomSource protocol.

Uses the secrets module for cryptographic randomness.
"""

import secrets

CODE_MIN = 100000
CODE_MAX = 999999


class SecretsRandomSource:
    """
    Cryptographically secure token and code generator.

    Codes are drawn uniformly from 100000-999999, so an issued code never
    starts with a zero.
    """

    def __init__(self, token_bytes: int = 32) -> None:
        """
        Args:
            token_bytes: Random bytes per token; the hex token is twice as long
        """
        if token_bytes < 16:
            raise ValueError("token_bytes must be at least 16")
        self._token_bytes = token_bytes

    def token(self) -> str:
        return secrets.token_hex(self._token_bytes)

    def code(self) -> str:
        return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))
