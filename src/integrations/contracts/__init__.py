"""
Contracts (data models).

This folder defines the request/response shapes exchanged with the payment processor:
- line items and the hosted-session request
- the session object returned on create/retrieve

Both mock and real clients accept and return these contracts, so routes never
handle raw processor payloads.
"""
