"""Shortcode generation utility

This module provides a helper function for drawing random candidate
shortcodes from the Base62 alphabet.

Functions:
    generate_shortcode(length=6):
        Generate a random alphanumeric candidate suitable for use as a URL slug.

Example:
    >>> from linkshortener.utils import generate_shortcode
    >>> generate_shortcode()
    'q7FemO'
"""

import random
import string

from linkshortener.constants import Defaults


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def generate_shortcode(length: int = Defaults.SHORTCODE_LENGTH) -> str:
    """Generate a random Base62 candidate shortcode.

    Every character is drawn independently and uniformly from ALPHABET.
    The function is stateless: uniqueness is not guaranteed here and must be
    checked against the data store by the caller.

    Args:
        length (int, optional):
            Number of characters in the candidate.
            Defaults to 6 (62^6 ~ 56.8 billion possible codes).

    Returns:
        str: A random alphanumeric candidate shortcode.

    Raises:
        TypeError: if length is not an integer.
        ValueError: if length is not positive.

    NOTE:
        - Collision resistance is the concern here, not secrecy. The module
          level PRNG is uniform, which is all that is needed.
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length < 1:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(random.choices(ALPHABET, k=length))  # noqa: S311
