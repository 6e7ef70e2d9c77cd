"""
Real integration clients.

These clients communicate with the real payment processor (Stripe Checkout).

Important:
- Must implement the same interface as the mock clients (PaymentSessionProvider)
- Must return data shaped according to src/integrations/contracts/*

Switching:
The selection of mock vs real clients happens in src/api/dependencies.py only.
"""
