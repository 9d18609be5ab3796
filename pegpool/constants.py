"""Protocol constants for pegged basket pools.

Centralizes scales, governance caps and default parameters shared by the
primary and feeder pool configurations.
"""

# Fixed-point unit (1e18) used for weights, fees and pool-token amounts
SCALE = 10**18

# Ratio unit: ratio = 10 ** (26 - decimals), so vault * ratio / RATIO_SCALE
# lands in 18-decimal accounting units
RATIO_SCALE = 10**8

# Amplification is stored multiplied by A_PRECISION (A=100 -> 10_000)
A_PRECISION = 100
MAX_A = 1_000_000

# Newton-Raphson iteration cap for invariant and balance solves
MAX_ITERATIONS = 255

# Amplification ramp: minimum duration and cool-down between ramps
MIN_RAMP_TIME = 24 * 60 * 60

# Governance caps
MAX_FEE = 10**16  # 1%
MAX_CACHE_SIZE = 2 * 10**17  # 20%

# Scaled inputs and redemptions below this are rejected as dust
MIN_SCALED_INPUT = 10**6

# Soft weight limit: penalty at the exact bound, zone = (max - min) / divisor
MAX_WEIGHT_PENALTY = 5 * 10**16  # 5%
PENALTY_ZONE_DIVISOR = 10

# Defaults for a primary pool
DEFAULT_AMPLIFICATION = 100
DEFAULT_MIN_WEIGHT = 5 * 10**16  # 5%
DEFAULT_MAX_WEIGHT = 65 * 10**16  # 65%
DEFAULT_SWAP_FEE = 6 * 10**14  # 0.06%
DEFAULT_REDEMPTION_FEE = 3 * 10**14  # 0.03%
DEFAULT_CACHE_SIZE = 10**17  # 10%
DEFAULT_RECOL_FEE = 5 * 10**13  # 0.005%

# Defaults for a feeder pool
DEFAULT_FEEDER_MIN_WEIGHT = 20 * 10**16  # 20%
DEFAULT_FEEDER_MAX_WEIGHT = 80 * 10**16  # 80%
DEFAULT_FEEDER_FEE = 8 * 10**14  # 0.08%

# The null account; never a valid recipient
ZERO_ADDRESS = "0x" + "0" * 40

# Two-asset baskets cannot satisfy the n-asset weight rule; their limits
# must straddle these values instead
FEEDER_MIN_WEIGHT_CAP = 3 * 10**17  # 30%
FEEDER_MAX_WEIGHT_FLOOR = 7 * 10**17  # 70%
