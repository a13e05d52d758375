"""
Mock integration clients.

These clients return realistic responses without calling any external API.
They are used when:
- No Remote Store URL or database is configured
- We want to exercise the merge engine end-to-end in tests

Important:
- Mock clients must follow the SAME interface as real HTTP clients.
- Mock clients should return data shaped according to amanice/integrations/contracts/*

Switching to real:
Set REMOTE_STORE_URL (HTTP) or DATABASE_URL (SQL); the selection happens in
amanice/api/services.py.
"""
