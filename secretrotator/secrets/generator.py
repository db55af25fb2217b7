"""Cryptographically secure secret generation."""

import logging
import secrets
import string
from typing import List

from ..utils.errors import RandomSourceError, ValidationError
from .models import GeneratorOptions
from .validator import validate_generator_options

logger = logging.getLogger(__name__)

LOWERCASE_CHARS = string.ascii_lowercase
UPPERCASE_CHARS = string.ascii_uppercase
DIGIT_CHARS = string.digits
SPECIAL_CHARS = "!@#$%^&*()_+-=[]{}|;:,.<>?"
AMBIGUOUS_CHARS = "0Ol1"


class SecretGenerator:
    """Generates random secrets from character-class options."""

    def __init__(self):
        """Initialize secret generator."""
        self._random = secrets.SystemRandom()

    def generate(self, options: GeneratorOptions) -> str:
        """
        Generate a secret matching the given options.

        The digit and special-character minimums are drawn first, the rest of
        the positions come from the full alphabet, and the whole sequence is
        shuffled so guaranteed characters do not sit at fixed positions.

        Args:
            options: Generator options

        Returns:
            str: Generated secret of exactly ``options.length`` characters

        Raises:
            ValidationError: If the options are invalid or leave no usable characters
            RandomSourceError: If the system entropy source fails
        """
        validate_generator_options(options)

        alphabet = self.build_alphabet(options)
        if not alphabet:
            raise ValidationError(
                "generator_options",
                "no characters left after excluding ambiguous characters",
            )

        required = [
            (self._class_pool(DIGIT_CHARS, options), options.required_digits, "digit"),
            (self._class_pool(SPECIAL_CHARS, options), options.required_special, "special"),
        ]

        try:
            secret: List[str] = []
            for pool, count, name in required:
                if count and not pool:
                    raise ValidationError(
                        "generator_options",
                        f"no {name} characters left after excluding ambiguous characters",
                    )
                secret.extend(secrets.choice(pool) for _ in range(count))

            secret.extend(secrets.choice(alphabet) for _ in range(options.length - len(secret)))

            self._random.shuffle(secret)

        except (OSError, NotImplementedError) as e:
            raise RandomSourceError(f"Failed to read from the system random source: {e}") from e

        logger.debug(f"Generated secret of length {len(secret)} from {len(alphabet)} characters")
        return "".join(secret)

    @staticmethod
    def build_alphabet(options: GeneratorOptions) -> str:
        """
        Build the set of characters a generated secret may contain.

        Args:
            options: Generator options

        Returns:
            str: Union of the enabled classes, minus ambiguous characters if requested
        """
        alphabet = ""
        if options.include_lowercase:
            alphabet += LOWERCASE_CHARS
        if options.include_uppercase:
            alphabet += UPPERCASE_CHARS
        if options.include_digits:
            alphabet += DIGIT_CHARS
        if options.include_special_chars:
            alphabet += SPECIAL_CHARS

        if options.exclude_ambiguous:
            alphabet = _remove_ambiguous(alphabet)

        return alphabet

    @staticmethod
    def _class_pool(chars: str, options: GeneratorOptions) -> str:
        if options.exclude_ambiguous:
            return _remove_ambiguous(chars)
        return chars


def _remove_ambiguous(chars: str) -> str:
    return "".join(c for c in chars if c not in AMBIGUOUS_CHARS)
