from decimal import Decimal, InvalidOperation


class ValidationError(Exception):
    """入力エラー。通信前に処理を中断し、メッセージをフォームに表示する"""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


def parse_number(raw):
    """数値として解釈できなければ None（カンマ区切りは許容）。桁落ちしないよう Decimal で返す"""
    text = (raw or "").replace(",", "").strip()
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def is_whole(value):
    return value == value.to_integral_value()
