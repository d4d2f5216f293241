"""
hashfield 例外類別

所有錯誤皆繼承 HashFieldError，並同時繼承對應的內建例外，
呼叫端可用 ValueError / TypeError 等一般方式捕捉。
"""


class HashFieldError(Exception):
    """hashfield 所有錯誤的共同基底"""


class OptionsError(HashFieldError, ValueError):
    """編碼設定（salt、最小長度、字母表）不合法"""


class ClassificationError(HashFieldError, TypeError):
    """標記為雜湊的欄位型別不是支援的數值形狀"""

    def __init__(self, field: str, annotation: object):
        self.field = field
        self.annotation = annotation
        super().__init__(
            f"hash 標記只能用於無號整數、整數列表或其 Optional 型別，"
            f"但欄位 '{field}' 的型別為 '{_type_name(annotation)}'"
        )


class DecodeError(HashFieldError, ValueError):
    """字串無法解碼為合法的整數序列"""

    def __init__(self, message: str, token: str | None = None, field: str | None = None):
        self.message = message
        self.token = token
        self.field = field
        super().__init__(message)

    def __str__(self) -> str:
        if self.field is None:
            return self.message
        return f"欄位 '{self.field}' 解碼失敗: {self.message}"


class ArityError(DecodeError):
    """解碼結果不是恰好一個整數"""

    def __init__(self, token: str, count: int, field: str | None = None):
        self.count = count
        super().__init__(
            f"預期解碼出 1 個整數，實際為 {count} 個: {token}", token=token, field=field
        )


class ValueRangeError(HashFieldError, OverflowError):
    """待編碼的數值為負數，或超出 64 位元 / 欄位宣告寬度"""


class MissingFieldError(HashFieldError, ValueError):
    """輸入資料缺少必要欄位"""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"缺少欄位: {field}")


class DuplicateFieldError(HashFieldError, ValueError):
    """同一欄位在輸入中出現超過一次"""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"欄位重複: {field}")


def _type_name(annotation: object) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return repr(annotation).replace("typing.", "")
