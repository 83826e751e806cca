"""Push Relay: Shopify order webhooks to Firebase Cloud Messaging."""

__version__ = "0.1.0"
