"""Field arithmetic and witness values."""

from .field import FF, GOLDILOCKS_PRIME, canonical, ff, format_value
from .value import Value
