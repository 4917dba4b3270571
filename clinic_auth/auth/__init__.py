"""
Authentication module for the clinic system.

This module provides authentication and account lifecycle functionality including:
- User registration by administrative staff
- Public patient self-registration with linked patient record
- Login with server-side session and JWT token issuance
- Logout
- Administrative user update, deletion and listing
"""
