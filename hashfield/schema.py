"""
hashfield 資料結構描述模組

以 dataclass 欄位的 metadata 標記哪些欄位要雜湊，
並在類別建立時一次完成分類與驗證，結果依類別快取。
"""

import dataclasses
import threading
import typing
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from hashfield.classifier import FieldCategory, accepts_none, classify
from hashfield.errors import DuplicateFieldError

HASH_KEY = "hashfield.hashed"
RENAME_KEY = "hashfield.rename"
ALIASES_KEY = "hashfield.aliases"


def field(
    *,
    hashed: bool = False,
    rename: Optional[str] = None,
    aliases: Union[str, Iterable[str]] = (),
    metadata: Optional[dict] = None,
    **kwargs,
):
    """
    建立帶有 hashfield 設定的 dataclass 欄位

    Args:
        hashed: 是否將此欄位的整數編碼為字串
        rename: 輸出時使用的鍵名
        aliases: 輸入時額外接受的鍵名
        metadata: 其他要保留的 metadata
        **kwargs: 轉交給 dataclasses.field（default、default_factory 等）
    """
    if isinstance(aliases, str):
        aliases = (aliases,)

    merged = dict(metadata or {})
    merged[HASH_KEY] = hashed
    if rename is not None:
        merged[RENAME_KEY] = rename
    merged[ALIASES_KEY] = tuple(aliases)

    return dataclasses.field(metadata=merged, **kwargs)


@dataclass(frozen=True)
class FieldSpec:
    name: str
    category: FieldCategory
    wire_name: str
    aliases: tuple[str, ...] = ()
    has_default: bool = False
    nullable: bool = False

    @property
    def input_names(self) -> tuple[str, ...]:
        return (self.wire_name,) + self.aliases


@dataclass(frozen=True)
class RecordSchema:
    """單一 dataclass 的欄位分類結果"""

    record_type: type
    fields: tuple[FieldSpec, ...]
    _by_input_name: dict = dataclasses.field(init=False, repr=False, compare=False)

    def __post_init__(self):
        by_input_name = {}
        for spec in self.fields:
            for input_name in spec.input_names:
                if input_name in by_input_name:
                    raise DuplicateFieldError(input_name)
                by_input_name[input_name] = spec
        object.__setattr__(self, "_by_input_name", by_input_name)

    def lookup(self, key: str) -> Optional[FieldSpec]:
        """依輸入鍵名（輸出名稱或別名）找出欄位"""
        return self._by_input_name.get(key)


def _build_schema(cls: type) -> RecordSchema:
    hints = typing.get_type_hints(cls, include_extras=True)
    specs = []

    for f in dataclasses.fields(cls):
        if not f.init:
            continue

        annotation = hints.get(f.name, f.type)
        category = classify(annotation, hashed=bool(f.metadata.get(HASH_KEY)), field_name=f.name)
        has_default = (
            f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        )
        specs.append(
            FieldSpec(
                name=f.name,
                category=category,
                wire_name=f.metadata.get(RENAME_KEY, f.name),
                aliases=tuple(f.metadata.get(ALIASES_KEY, ())),
                has_default=has_default,
                nullable=category.is_optional or accepts_none(annotation),
            )
        )

    return RecordSchema(cls, tuple(specs))


_cache: dict[type, RecordSchema] = {}
_cache_lock = threading.Lock()


def schema_for(cls: type) -> RecordSchema:
    """
    取得 dataclass 的欄位描述（第一次呼叫時驗證並快取）

    Raises:
        TypeError: cls 不是 dataclass
        ClassificationError: 標記為雜湊的欄位型別不支援
        DuplicateFieldError: 兩個欄位的鍵名或別名重複
    """
    schema = _cache.get(cls)
    if schema is not None:
        return schema

    if not isinstance(cls, type) or not dataclasses.is_dataclass(cls):
        raise TypeError(f"需要 dataclass 類別，收到 {cls!r}")

    schema = _build_schema(cls)
    with _cache_lock:
        return _cache.setdefault(cls, schema)


def record(cls=None, /, **dataclass_kwargs):
    """
    類別裝飾器：必要時套用 dataclass，並立即驗證欄位分類

    可寫成 @record 或 @record(frozen=True)。
    分類錯誤會在類別定義時就拋出，不會延後到第一次序列化。
    """

    def wrap(cls):
        if "__dataclass_fields__" not in cls.__dict__:
            cls = dataclasses.dataclass(cls, **dataclass_kwargs)
        schema_for(cls)
        return cls

    if cls is None:
        return wrap
    return wrap(cls)
