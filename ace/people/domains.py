"""
Email domain classification.

Personal (free-mail) domains carry no company signal and are kept out of
company-context search queries.
"""

PERSONAL_EMAIL_DOMAINS = frozenset({
    "gmail.com",
    "yahoo.com",
    "hotmail.com",
    "icloud.com",
    "outlook.com",
    "aol.com",
})


def extract_domain(email: str) -> str:
    """
    Extract the lowercase domain from an email address.

    Args:
        email: Email address string

    Returns:
        Domain after the last '@', or "" if there is none
    """
    if not email or "@" not in email:
        return ""
    return email.rsplit("@", 1)[1].strip().lower()


def is_personal_domain(domain: str) -> bool:
    """Check whether a domain is a free-mail provider."""
    return (domain or "").strip().lower() in PERSONAL_EMAIL_DOMAINS


def company_domain(email: str) -> str:
    """Domain of the email when it is corporate, otherwise ""."""
    domain = extract_domain(email)
    if is_personal_domain(domain):
        return ""
    return domain


def looks_like_email(value: str) -> bool:
    return bool(value) and "@" in value
