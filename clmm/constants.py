"""Protocol constants for the pricing/routing core.

Fixed-point and fee parameters shared by the math and pricing layers.
"""

# Q64.96 fixed point (UniswapV3 sqrt price representation)
RESOLUTION = 96
Q96 = 1 << RESOLUTION
Q128 = 1 << 128
Q192 = 1 << 192

# Fee denominator: fees are expressed in hundredths of a basis point (pips)
FEE_DENOMINATOR = 1_000_000

# Maximum number of bridge connectors alongside the quote currency
MAX_BRIDGE_CONNECTORS = 3

