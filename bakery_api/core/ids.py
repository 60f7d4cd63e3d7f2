"""
Bakery API — Order identifiers

Ten characters drawn uniformly from [0-9A-Za-z]. Uniqueness is not checked
against the store.
"""
import secrets
import string

ORDER_ID_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
ORDER_ID_LENGTH = 10


def generate_order_id() -> str:
    return "".join(secrets.choice(ORDER_ID_ALPHABET) for _ in range(ORDER_ID_LENGTH))
