"""
hashfield 命令列工具

    python -m hashfield salt
    python -m hashfield encode 158674 --salt "hello world" --min-length 10
    python -m hashfield decode qKknODM7Ej --salt "hello world" --min-length 10 --single
"""

import argparse
import logging
import sys

from hashfield.codec import Codec
from hashfield.config import load_options
from hashfield.errors import HashFieldError
from hashfield.options import SALT_LENGTH, CodecOptions, generate_salt

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _add_codec_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", help="INI 設定檔路徑")
    parser.add_argument("--salt", help="覆寫設定中的 salt")
    parser.add_argument("--min-length", type=int, help="覆寫設定中的最小長度")
    parser.add_argument("--alphabet", help="覆寫設定中的字母表")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hashfield", description="整數 ID 可逆混淆編碼工具")
    parser.add_argument("-v", "--verbose", action="store_true", help="顯示除錯訊息")
    sub = parser.add_subparsers(dest="command", required=True)

    salt_parser = sub.add_parser("salt", help="產生隨機 salt")
    salt_parser.add_argument("--length", type=int, default=SALT_LENGTH, help="salt 長度")

    encode_parser = sub.add_parser("encode", help="將整數編碼為字串")
    encode_parser.add_argument("values", nargs="+", type=int, help="要編碼的非負整數")
    _add_codec_arguments(encode_parser)

    decode_parser = sub.add_parser("decode", help="將字串解碼為整數")
    decode_parser.add_argument("token", help="要解碼的字串")
    decode_parser.add_argument("--single", action="store_true", help="必須恰好解出一個整數")
    _add_codec_arguments(decode_parser)

    return parser


def _options_from_args(args: argparse.Namespace) -> CodecOptions:
    options = load_options(args.config)
    if args.salt is not None:
        options = options.with_salt(args.salt)
    if args.min_length is not None:
        options = options.with_min_length(args.min_length)
    if args.alphabet is not None:
        options = options.with_alphabet(args.alphabet)
    return options


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    try:
        if args.command == "salt":
            if args.length <= 0:
                raise HashFieldError(f"salt 長度必須為正整數: {args.length}")
            print(generate_salt(args.length))
            return 0

        codec = Codec(_options_from_args(args))
        if args.command == "encode":
            print(codec.encode(args.values))
        elif args.single:
            print(codec.decode_single(args.token))
        else:
            print(" ".join(str(v) for v in codec.decode(args.token)))
    except (HashFieldError, FileNotFoundError) as e:
        print(f"錯誤: {e}", file=sys.stderr)
        return 1

    return 0
