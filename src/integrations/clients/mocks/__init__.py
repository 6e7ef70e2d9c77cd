"""
Mock integration clients.

These clients return fake (but realistic) responses without calling any external API.
They are used when:
- INTEGRATIONS_MODE is mock/test (local development without Stripe credentials)
- We want to test routes end-to-end without external dependencies

Important:
- Mock clients must follow the SAME interface as the real clients.
- Mock clients should return data shaped according to src/integrations/contracts/*
"""
