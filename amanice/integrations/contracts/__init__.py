"""
Contracts (data models).

This folder defines the shapes exchanged with the catalog's collaborators:
- Product variants (regular / shoe) and their wire format
- Cart lines and admin write receipts
- The Result type returned by Remote Store reads

Both mock and real clients, and the SQL adapter, use these contracts so that
the merge engine never works on ad-hoc dicts.
"""
