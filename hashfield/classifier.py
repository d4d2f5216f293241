"""
hashfield 欄位分類模組

依欄位宣告的型別判斷要套用哪一種轉換：
單一整數、整數列表、Optional 整數、Optional 整數列表，或原樣傳遞。
分類只看型別形狀，與欄位值無關。
"""

import enum
import struct
import types
import typing
from dataclasses import dataclass
from typing import Annotated, Optional

from hashfield.errors import ClassificationError


@dataclass(frozen=True)
class UnsignedWidth:
    """無號整數寬度標記，搭配 typing.Annotated 使用"""

    bits: int

    @property
    def max_value(self) -> int:
        return 2**self.bits - 1


U8 = Annotated[int, UnsignedWidth(8)]
U16 = Annotated[int, UnsignedWidth(16)]
U32 = Annotated[int, UnsignedWidth(32)]
U64 = Annotated[int, UnsignedWidth(64)]
U128 = Annotated[int, UnsignedWidth(128)]
USize = Annotated[int, UnsignedWidth(struct.calcsize("P") * 8)]

DEFAULT_WIDTH = UnsignedWidth(64)


class FieldKind(enum.Enum):
    NUMERIC = "numeric"
    SEQUENCE = "sequence"
    OPTIONAL_NUMERIC = "optional_numeric"
    OPTIONAL_SEQUENCE = "optional_sequence"
    PASSTHROUGH = "passthrough"


@dataclass(frozen=True)
class FieldCategory:
    """欄位分類結果；PASSTHROUGH 以外都帶有數值寬度"""

    kind: FieldKind
    width: Optional[UnsignedWidth] = None

    @property
    def is_optional(self) -> bool:
        return self.kind in (FieldKind.OPTIONAL_NUMERIC, FieldKind.OPTIONAL_SEQUENCE)

    @property
    def is_hashed(self) -> bool:
        return self.kind is not FieldKind.PASSTHROUGH


PASSTHROUGH = FieldCategory(FieldKind.PASSTHROUGH)


def _numeric_width(annotation) -> Optional[UnsignedWidth]:
    """int 或 Annotated[int, UnsignedWidth] 回傳寬度，其他型別回傳 None"""
    if annotation is int:
        return DEFAULT_WIDTH

    if typing.get_origin(annotation) is Annotated:
        base, *extras = typing.get_args(annotation)
        widths = [extra for extra in extras if isinstance(extra, UnsignedWidth)]
        if base is int and len(widths) == 1:
            return widths[0]

    return None


def _sequence_item(annotation):
    """list[X] / List[X] 回傳 X，其他型別回傳 None"""
    if typing.get_origin(annotation) is list:
        args = typing.get_args(annotation)
        if len(args) == 1:
            return args[0]
    return None


def _optional_inner(annotation):
    """Optional[X]、Union[X, None]、X | None 回傳 X，其他型別回傳 None"""
    if typing.get_origin(annotation) not in (typing.Union, types.UnionType):
        return None

    args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
    if len(args) == 1 and len(typing.get_args(annotation)) == 2:
        return args[0]
    return None


def _numeric_shape(annotation) -> Optional[FieldCategory]:
    width = _numeric_width(annotation)
    if width is not None:
        return FieldCategory(FieldKind.NUMERIC, width)

    item = _sequence_item(annotation)
    if item is not None:
        width = _numeric_width(item)
        if width is not None:
            return FieldCategory(FieldKind.SEQUENCE, width)

    return None


def classify(annotation, *, hashed: bool = True, field_name: str = "<field>") -> FieldCategory:
    """
    判斷欄位的轉換類別

    Args:
        annotation: 欄位宣告的型別
        hashed: 欄位是否標記為需要雜湊；未標記的欄位一律原樣傳遞
        field_name: 錯誤訊息中顯示的欄位名稱

    Returns:
        FieldCategory

    Raises:
        ClassificationError: 標記為雜湊但型別不是四種支援的數值形狀
    """
    if not hashed:
        return PASSTHROUGH

    category = _numeric_shape(annotation)
    if category is not None:
        return category

    inner = _optional_inner(annotation)
    if inner is not None:
        category = _numeric_shape(inner)
        if category is not None:
            optional_kind = {
                FieldKind.NUMERIC: FieldKind.OPTIONAL_NUMERIC,
                FieldKind.SEQUENCE: FieldKind.OPTIONAL_SEQUENCE,
            }[category.kind]
            return FieldCategory(optional_kind, category.width)

    raise ClassificationError(field_name, annotation)


def accepts_none(annotation) -> bool:
    """原樣傳遞欄位是否允許缺值時補 None"""
    return annotation is type(None) or _optional_inner(annotation) is not None
