# wedsite/utils/pii.py  # Helpers para no escribir datos personales en los logs.

from typing import Optional  # Tipado opcional para claridad.


def mask_email(email: Optional[str]) -> str:
    """Enmascara un email para no exponer PII en logs. 'test@example.com' -> 'te**@example.com'."""
    if not email:                                                      # Si no hay email, devuelve un placeholder.
        return "<empty>"
    if "@" not in email:                                               # Si no tiene '@', enmascara parcialmente el final.
        return f"{email[:2]}***"
    user, domain = email.split("@", 1)                                 # Divide el email en usuario y dominio.
    return f"{user[:2]}{'*' * max(len(user) - 2, 0)}@{domain}"         # Enmascara parte del usuario y mantiene el dominio.
