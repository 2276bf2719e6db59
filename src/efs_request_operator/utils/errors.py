"""Error sanitization utilities to prevent information leakage."""

import re


# Patterns that might expose sensitive information
SENSITIVE_PATTERNS = [
    r"access[_\s]?key[_\s]?id[:\s=]+([A-Z0-9]{16,128})",
    r"secret[_\s]?access[_\s]?key[:\s=]+([A-Za-z0-9/+=]{40})",
    r"session[_\s]?token[:\s=]+([A-Za-z0-9/+=]+)",
    r"arn:aws:(?:iam|sts)::(\d{12})",
    r"account[_\s]?id[:\s=]+(\d{12})",
]

# Bare AWS access key ids, e.g. in signature mismatch messages
ACCESS_KEY_ID_PATTERN = r"\b((?:AKIA|ASIA)[A-Z0-9]{16})\b"

# Fields to redact completely
SENSITIVE_FIELDS = {
    "aws_access_key_id",
    "aws_secret_access_key",
    "aws_session_token",
    "password",
    "credentials",
    "token",
}


def sanitize_error_message(message: str) -> str:
    """Sanitize error message to remove sensitive information.

    Args:
        message: Original error message

    Returns:
        Sanitized error message with sensitive data redacted
    """
    sanitized = message

    for pattern in SENSITIVE_PATTERNS:
        sanitized = re.sub(
            pattern,
            lambda m: m.group(0).replace(m.group(1), "[REDACTED]"),
            sanitized,
            flags=re.IGNORECASE,
        )

    sanitized = re.sub(ACCESS_KEY_ID_PATTERN, "[REDACTED]", sanitized)

    for field in SENSITIVE_FIELDS:
        sanitized = re.sub(
            rf"\b{field}[:=]\s*([^\s,;\)]+)",
            rf"{field}: [REDACTED]",
            sanitized,
            flags=re.IGNORECASE,
        )

    return sanitized


def sanitize_exception(error: Exception) -> str:
    """Sanitize exception message.

    Args:
        error: Exception object

    Returns:
        Sanitized error message
    """
    error_msg = str(error) or type(error).__name__
    return sanitize_error_message(error_msg)
