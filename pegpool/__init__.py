"""pegpool - multi-asset value-pegged pools."""

from pegpool.pools import FeederPool, Pool

__version__ = "0.1.0"
__all__ = ["FeederPool", "Pool", "__version__"]
