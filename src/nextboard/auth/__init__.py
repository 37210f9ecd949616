"""Sign-in, sign-out, lockout and session tracking."""
