"""rootbasket — unified API
Install once, import one namespace:

    pip install -e .

Usage:

    import rootbasket as rb
    n, payload = rb.read_basket(rb.OnDisk("simple.root", 218, 86))
    values = rb.as_array(payload, ">i4", n)

Or detailed modules:

    from rootbasket import codec, wf
"""

__version__ = "0.3.0"

# Sub-packages live under packages/*/src
import rbcodec as codec
import rbwf as wf

# High-level convenience re-exports (top-level functions)
from rbcodec import (
    DecodeConfig, PathsConfig,
    RootBasketError, BasketIOError, MalformedHeader,
    UnsupportedCodec, DecompressionError, CorruptBasket, ContainerConsumed,
    KeyHeader, unpack_key_header,
    Codec, decompress, sniff_codec,
    BasketHeader, unpack_basket_header, decode_basket,
    InMemory, OnDisk, resolve, read_basket,
    as_array,
)
from rbwf import read_baskets, iter_baskets, concat_payloads

__all__ = [
    # sub-namespaces
    "codec", "wf",
    # configuration
    "DecodeConfig", "PathsConfig",
    # errors
    "RootBasketError", "BasketIOError", "MalformedHeader",
    "UnsupportedCodec", "DecompressionError", "CorruptBasket", "ContainerConsumed",
    # decoding
    "KeyHeader", "unpack_key_header",
    "Codec", "decompress", "sniff_codec",
    "BasketHeader", "unpack_basket_header", "decode_basket",
    "InMemory", "OnDisk", "resolve", "read_basket",
    "as_array",
    # workflow
    "read_baskets", "iter_baskets", "concat_payloads",
    "__version__",
]
