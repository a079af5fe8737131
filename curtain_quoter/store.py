"""
テーブル名で指定する汎用クエリクライアント

画面側は ORM モデルを直接触らず、ここを経由して
select / insert / update / delete を1リクエスト1操作で実行する。
戻り値は常に dict（またはその list）。
"""
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from curtain_quoter import db
from curtain_quoter.models import (
    AuthorizedUser,
    Fabric,
    Product,
    ProductFabric,
    Quote,
    QuoteItem,
)

TABLES = {
    "quotes": Quote,
    "quote_items": QuoteItem,
    "fabrics": Fabric,
    "products": Product,
    "product_fabrics": ProductFabric,
    "authorized_users": AuthorizedUser,
}


class StoreError(Exception):
    """ストア操作の失敗。message はそのまま画面に表示する"""

    def __init__(self, message, table=None):
        super().__init__(message)
        self.message = message
        self.table = table


class NotFoundError(StoreError):
    pass


def _error_message(exc):
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


def row_to_dict(obj, columns=None):
    names = columns or [c.name for c in obj.__table__.columns]
    row = {}
    for name in names:
        value = getattr(obj, name)
        if isinstance(value, datetime):
            value = value.isoformat()
        row[name] = value
    return row


class Query:
    def __init__(self, table):
        if table not in TABLES:
            raise StoreError(f'relation "{table}" does not exist', table=table)
        self.table = table
        self.model = TABLES[table]
        self._columns = None
        self._filters = []
        self._order = []
        self._limit = None

    def _column(self, name):
        col = self.model.__table__.columns.get(name)
        if col is None:
            raise StoreError(f'column {self.table}.{name} does not exist', table=self.table)
        return getattr(self.model, name)

    # --- builder ---
    def select(self, *columns):
        for name in columns:
            self._column(name)
        self._columns = list(columns) or None
        return self

    def eq(self, column, value):
        self._filters.append(self._column(column) == value)
        return self

    def in_(self, column, values):
        self._filters.append(self._column(column).in_(list(values)))
        return self

    def order(self, column, desc=False):
        col = self._column(column)
        self._order.append(col.desc() if desc else col.asc())
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _query(self):
        q = self.model.query
        for cond in self._filters:
            q = q.filter(cond)
        if self._order:
            q = q.order_by(*self._order)
        if self._limit is not None:
            q = q.limit(self._limit)
        return q

    # --- execute ---
    def execute(self):
        try:
            rows = self._query().all()
        except SQLAlchemyError as e:
            raise self._fail("select", e)
        return [row_to_dict(r, self._columns) for r in rows]

    def single(self):
        rows = self.limit(2).execute() if self._limit is None else self.execute()
        if len(rows) != 1:
            raise NotFoundError(
                "no rows returned" if not rows else "multiple rows returned", table=self.table
            )
        return rows[0]

    def insert(self, rows):
        """1件(dict)または複数件(list)を登録し、登録後の行を list で返す"""
        if isinstance(rows, dict):
            rows = [rows]
        objs = []
        for values in rows:
            for name in values:
                self._column(name)
            objs.append(self.model(**values))
        try:
            db.session.add_all(objs)
            db.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("insert", e)
        current_app.logger.info("[STORE] insert table=%s count=%s", self.table, len(objs))
        return [row_to_dict(o, self._columns) for o in objs]

    def update(self, values):
        if not self._filters:
            raise StoreError("UPDATE requires a filter", table=self.table)
        for name in values:
            self._column(name)
        try:
            objs = self._query().all()
            for obj in objs:
                for name, value in values.items():
                    setattr(obj, name, value)
            db.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("update", e)
        current_app.logger.info("[STORE] update table=%s count=%s", self.table, len(objs))
        return [row_to_dict(o, self._columns) for o in objs]

    def delete(self):
        if not self._filters:
            raise StoreError("DELETE requires a filter", table=self.table)
        try:
            objs = self._query().all()
            # ORM の cascade（見積→明細）を効かせるため1件ずつ削除
            for obj in objs:
                db.session.delete(obj)
            db.session.commit()
        except SQLAlchemyError as e:
            raise self._fail("delete", e)
        current_app.logger.info("[STORE] delete table=%s count=%s", self.table, len(objs))
        return len(objs)

    def _fail(self, op, exc):
        db.session.rollback()
        message = _error_message(exc)
        current_app.logger.warning("[STORE] %s failed table=%s: %s", op, self.table, message)
        return StoreError(message, table=self.table)


def table(name):
    return Query(name)
