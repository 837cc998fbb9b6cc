"""User-facing messages for authentication failures.

Unknown email, wrong password and password-less accounts all map to
INVALID_CREDENTIALS so a login response never reveals whether an account exists.
"""

INVALID_CREDENTIALS = "Invalid credentials"
IDENTITY_CONFLICT = "A user with this email already exists"
EXTERNAL_LOGIN_OWNED_BY_OTHER_USER = "This external account is linked to another user"
INVALID_REFRESH_TOKEN = "Invalid refresh token"
REFRESH_TOKEN_REVOKED = "Refresh token has been revoked"
USER_ACCOUNT_BANNED = "User account is banned"
USER_NOT_FOUND = "User not found"
INVALID_GOOGLE_TOKEN = "Invalid Google ID token"
GOOGLE_EMAIL_NOT_VERIFIED = "Google account email is not verified"
USER_ALREADY_HAS_PASSWORD = "User already has a password"
INSUFFICIENT_ROLE = "Insufficient role for this operation"
MISSING_BEARER_TOKEN = "Missing or invalid Authorization header"
INVALID_ACCESS_TOKEN = "Invalid access token"
UNEXPECTED_ERROR = "An unexpected error occurred. Please try again later."
