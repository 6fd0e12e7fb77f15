import logging
import os

# Use paths next to this module so receipts land in the same place regardless
# of the working directory the simulation is launched from.
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
RECEIPTS_DIR = os.path.join(BASE_DIR, "receipts")

SHIPPING_RATE_PER_KG = 10.0

# Seconds to wait for a product or customer lock before giving up on a checkout
CHECKOUT_LOCK_TIMEOUT = 5.0

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_LEVEL = "INFO"


def configure_logging(level=LOG_LEVEL):
    # basicConfig writes to stderr, stdout is reserved for notices and receipts
    logging.basicConfig(level=level, format=LOG_FORMAT)
