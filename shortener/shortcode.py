"""Short code generation utilities."""

import secrets
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate random short codes for URLs."""

    # Alphanumerics without look-alikes (0/O/o, 1/l/I)
    ALPHABET = "".join(
        c for c in string.ascii_letters + string.digits if c not in "0Oo1lI"
    )

    def __init__(self, default_length: int = 7, alphabet: Optional[str] = None):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
            alphabet: Characters to draw from (defaults to ALPHABET)
        """
        self.default_length = default_length
        self.alphabet = alphabet or self.ALPHABET

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code
        """
        length = length or self.default_length
        return "".join(secrets.choice(self.alphabet) for _ in range(length))

