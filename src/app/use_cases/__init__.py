"""
Use Cases

Organized into domain folders:
- auth/: Credential and session lifecycle flows
"""
