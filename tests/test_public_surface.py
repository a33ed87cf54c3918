from __future__ import annotations


def test_umbrella_namespace():
    import rootbasket as rb
    assert rb.codec is not None and rb.wf is not None
    for name in ("read_basket", "resolve", "decode_basket", "decompress",
                 "unpack_key_header", "InMemory", "OnDisk", "read_baskets", "as_array"):
        assert callable(getattr(rb, name)), name


def test_error_taxonomy():
    from rbcodec import errors as e
    assert issubclass(e.BasketIOError, OSError)
    for cls in (e.MalformedHeader, e.UnsupportedCodec, e.DecompressionError, e.CorruptBasket):
        assert issubclass(cls, ValueError)
        assert issubclass(cls, e.RootBasketError)
    assert issubclass(e.ContainerConsumed, RuntimeError)
