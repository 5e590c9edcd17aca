"""
storefront - client-side session state for the storefront web app.

Orders, cart and the HTTP client that talks to the storefront backend.
"""

__version__ = "0.1.0"
