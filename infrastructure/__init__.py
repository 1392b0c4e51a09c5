"""
Infrastructure Package
======================

Provides abstraction layers for external dependencies.

Modules:
    - payments: Payment provider abstraction (Stripe, mock)
    - container: Lazily built, shared service instances
"""
