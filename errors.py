class InvalidOperation(Exception):
    """Raised when a product, cart, customer or checkout rule is violated."""
