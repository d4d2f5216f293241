"""
hashfield：序列化時將整數 ID 轉為可逆的混淆字串

    from hashfield import CodecOptions, U64, dumps, field, loads, record

    CodecOptions().with_salt("hello world").with_min_length(10).build()

    @record
    class User:
        id: U64 = field(hashed=True)
        name: str = ""

    dumps(User(id=158674, name="Dan"))   # '{"id": "...", "name": "Dan"}'
"""

from hashfield.classifier import (
    U8,
    U16,
    U32,
    U64,
    U128,
    FieldCategory,
    FieldKind,
    UnsignedWidth,
    USize,
    classify,
)
from hashfield.codec import Codec, codec_for, decode, decode_single, encode, encode_single
from hashfield.dispatcher import (
    decode_value,
    dumps,
    encode_value,
    from_dict,
    loads,
    to_dict,
)
from hashfield.errors import (
    ArityError,
    ClassificationError,
    DecodeError,
    DuplicateFieldError,
    HashFieldError,
    MissingFieldError,
    OptionsError,
    ValueRangeError,
)
from hashfield.options import CodecOptions, generate_salt, get_options, install_options, is_configured
from hashfield.schema import field, record, schema_for

__version__ = "0.1.0"
