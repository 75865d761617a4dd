from typing import List, Optional

# bcrypt ignores everything past this many bytes
MAX_PASSWORD_BYTES = 72

def validate_password(password: Optional[str]) -> tuple[bool, Optional[List[str]]]:
    """
    Validate password against defined rules

    Password Rules:
    - Present and not blank
    - At most 72 bytes once UTF-8 encoded

    Returns:
        tuple: (is_valid, list_of_error_messages)
    """
    errors = []

    if password is None or not password.strip():
        errors.append("can't be blank")
    elif len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append(f"is too long (maximum is {MAX_PASSWORD_BYTES} bytes)")

    is_valid = len(errors) == 0
    return is_valid, errors if not is_valid else None
