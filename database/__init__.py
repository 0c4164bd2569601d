from .core import get_db_connection, initialize_database, RATING_CODES
from .transaction_helpers import transaction

__all__ = [
    'get_db_connection',
    'initialize_database',
    'transaction',
    'RATING_CODES',
]
