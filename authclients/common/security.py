import hmac
import random
import string

UNICODE_ASCII_CHARACTER_SET = string.ascii_letters + string.digits


def generate_token(length=30, chars=UNICODE_ASCII_CHARACTER_SET):
    rand = random.SystemRandom()
    return "".join(rand.choice(chars) for _ in range(length))


def constant_time_equals(a, b):
    """Compare two byte strings without leaking where they differ."""
    return hmac.compare_digest(a, b)
