from __future__ import annotations
import argparse, json, logging, sys
from dataclasses import asdict
from pathlib import Path

from .common import setup_logging, hexdump
from rbcodec import (
    DecodeConfig, OnDisk, PathsConfig, RootBasketError,
    as_array, decode_basket, resolve, sniff_codec, unpack_basket_header,
)

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="rootbasket — dump one basket stored in a container file")
    p.add_argument("file", help="Container file (relative paths are anchored on ROOTBASKET_DATA_DIR)")
    p.add_argument("--offset", type=int, required=True, help="Byte offset of the basket key")
    p.add_argument("--length", type=int, required=True, help="Stored size of key + payload")
    p.add_argument("--dtype", default=None, help="Element type of the branch (ex: >f4, >i4)")
    p.add_argument("--per-entry", type=int, default=1, help="Elements per entry (fixed-size arrays)")
    p.add_argument("--hexdump", action="store_true", help="Print the trimmed payload as hex")
    p.add_argument("--json", action="store_true", help="Print a JSON summary instead of text")
    p.add_argument("--check-alignment", action="store_true", help="Require sub-header to end at key_len")
    p.add_argument("--log-file", default=None)
    p.add_argument("--verbose", action="store_true")
    return p.parse_args(argv)

def dump_basket(path: Path, offset: int, length: int, cfg: DecodeConfig) -> dict:
    header, data = resolve(OnDisk(path, offset, length))
    bh, consumed = unpack_basket_header(data)
    raw_len = len(data) - consumed
    compressed = header.uncompressed_len > raw_len
    codec = sniff_codec(data[consumed:]) if compressed else None
    n_entries, payload = decode_basket(header, data, cfg)
    return {
        "file": str(path),
        "offset": offset,
        "length": length,
        "key": asdict(header),
        "basket": asdict(bh),
        "compressed": compressed,
        "codec": codec.label if codec else None,
        "n_entries": n_entries,
        "payload_len": len(payload),
        "payload": payload,
    }

def _print_text(info: dict, args) -> None:
    key, bh = info["key"], info["basket"]
    print(f"{info['file']} @ {info['offset']} (+{info['length']})")
    print(f"  key     : {key['class_name']} {key['name']!r} title={key['title']!r} cycle={key['cycle']}")
    print(f"            total_bytes={key['total_bytes']} key_len={key['key_len']} "
          f"uncompressed_len={key['uncompressed_len']} version={key['version']}")
    print(f"  basket  : version={bh['version']} buffer_size={bh['buffer_size']} entry_size={bh['entry_size']} "
          f"n_entries={bh['n_entries']} last_offset={bh['last_offset']} flag={bh['flag']}")
    print(f"  codec   : {info['codec'] or 'none'}")
    print(f"  payload : {info['payload_len']} bytes, {info['n_entries']} entries")
    if args.dtype:
        print(as_array(info["payload"], args.dtype, info["n_entries"], args.per_entry))
    if args.hexdump:
        print(hexdump(info["payload"]))

def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)

    path = PathsConfig.from_env().resolve(args.file)
    cfg = DecodeConfig.from_env()
    if args.check_alignment:
        cfg = DecodeConfig(check_key_alignment=True, max_basket_bytes=cfg.max_basket_bytes)
    try:
        logging.debug("dump: %s offset=%d length=%d", path, args.offset, args.length)
        info = dump_basket(path, args.offset, args.length, cfg)
        if args.json:
            out = dict(info)
            out["payload"] = info["payload"].hex() if args.hexdump else None
            if args.dtype:
                out["values"] = as_array(info["payload"], args.dtype, info["n_entries"], args.per_entry).tolist()
            print(json.dumps(out, indent=2))
        else:
            _print_text(info, args)
    except (RootBasketError, ValueError) as e:
        logging.error("Échec lecture basket %s @ %d: %s", path, args.offset, e)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
