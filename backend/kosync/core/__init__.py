# kosync/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Reserved admin account creation on startup
- client_ip: Client address attribution for request logs
- db: Database configuration and connection management
- errors: Domain error types and problem responses
- policies: Identity claims and authorization policies
- responses: JSON bodies that keep Decimal values exact
- security: Password hashing and header credential authentication
"""
