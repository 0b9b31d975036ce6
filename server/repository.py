"""FakeSO: record store access.

Routes never touch SQL directly. The repository hands out plain dict
documents, resolves id references on request (``fetch_with_relations``)
and runs every read-modify-write on a single record inside one
``BEGIN IMMEDIATE`` transaction.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Callable, Iterable, List, Optional

from db import COLUMNS, encode_fields, get_db, row_to_doc
from fastapi import Request

logger = logging.getLogger(__name__)

# field -> referenced table, per table
RELATIONS = {
    "accounts": {"questions": "questions", "answers": "answers", "threads": "threads"},
    "questions": {"tags": "tags", "answers": "answers", "comments": "comments"},
    "answers": {"comments": "comments"},
    "threads": {"messages": "messages"},
}

# What a single question view shows
QUESTION_RELATIONS = ("tags", "answers.comments", "comments")


class ConflictError(Exception):
    """A write violated a uniqueness constraint."""


def _check_columns(table: str, names: Iterable[str]) -> None:
    allowed = COLUMNS.get(table)
    if allowed is None:
        raise ValueError(f"Unknown collection: {table}")
    unknown = [n for n in names if n != "id" and n not in allowed]
    if unknown:
        raise ValueError(f"Unknown field(s) for {table}: {', '.join(unknown)}")


class Repository:
    def __init__(self, db_path):
        self.db_path = db_path

    # --- reads ---

    def get(self, table: str, doc_id) -> Optional[dict]:
        _check_columns(table, ())
        with get_db(self.db_path) as conn:
            row = conn.execute(
                f"SELECT * FROM {table} WHERE id = ?", (doc_id,)
            ).fetchone()
        return row_to_doc(table, row) if row else None

    def get_many(self, table: str, ids: List[int]) -> List[dict]:
        """Fetch documents by id, keeping the order of ``ids``.

        Ids with no matching row are skipped.
        """
        _check_columns(table, ())
        if not ids:
            return []
        ph = ",".join("?" * len(ids))
        with get_db(self.db_path) as conn:
            rows = conn.execute(
                f"SELECT * FROM {table} WHERE id IN ({ph})", list(ids),
            ).fetchall()
        by_id = {r["id"]: row_to_doc(table, r) for r in rows}
        return [by_id[i] for i in ids if i in by_id]

    def find(self, table: str, **where) -> List[dict]:
        """Equality match on scalar columns, in insertion order."""
        _check_columns(table, where)
        query = f"SELECT * FROM {table}"
        if where:
            query += " WHERE " + " AND ".join(f"{k} = ?" for k in where)
        query += " ORDER BY id"
        with get_db(self.db_path) as conn:
            rows = conn.execute(query, list(where.values())).fetchall()
        return [row_to_doc(table, r) for r in rows]

    def find_one(self, table: str, **where) -> Optional[dict]:
        docs = self.find(table, **where)
        return docs[0] if docs else None

    def count(self, table: str) -> int:
        _check_columns(table, ())
        with get_db(self.db_path) as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]

    def populate_many(self, table: str, docs: List[dict],
                      relations: Iterable[str]) -> List[dict]:
        """Replace id lists on each doc with the referenced documents.

        Relations are field names, dotted for nested population
        (``"answers.comments"``). One query per relation level, not per
        document. Input documents are not modified.
        """
        docs = [dict(d) for d in docs]
        nested = {}
        for rel in relations:
            head, _, rest = rel.partition(".")
            nested.setdefault(head, [])
            if rest:
                nested[head].append(rest)
        for field, sub in nested.items():
            target = RELATIONS.get(table, {}).get(field)
            if target is None:
                raise ValueError(f"{table}.{field} is not a relation")
            ids = list(dict.fromkeys(i for d in docs for i in d.get(field) or []))
            children = self.get_many(target, ids)
            if sub:
                children = self.populate_many(target, children, sub)
            by_id = {c["id"]: c for c in children}
            for d in docs:
                d[field] = [by_id[i] for i in d.get(field) or [] if i in by_id]
        return docs

    def populate(self, table: str, doc: dict, relations: Iterable[str]) -> dict:
        return self.populate_many(table, [doc], relations)[0]

    def fetch_with_relations(
        self, table: str, doc_id, relations: Iterable[str] = ()
    ) -> Optional[dict]:
        doc = self.get(table, doc_id)
        if doc is None:
            return None
        return self.populate(table, doc, relations)

    # --- writes ---

    def insert(self, table: str, fields: dict) -> dict:
        _check_columns(table, fields)
        data = encode_fields(table, fields)
        cols = ", ".join(data)
        ph = ", ".join("?" * len(data))
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.execute(
                    f"INSERT INTO {table} ({cols}) VALUES ({ph})",
                    list(data.values()),
                )
                conn.commit()
                doc_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise ConflictError(str(e)) from e
        logger.info("Inserted %s #%s", table, doc_id)
        return self.get(table, doc_id)

    def modify(self, table: str, doc_id, change: Callable[[dict], dict]) -> Optional[dict]:
        """Atomically apply ``change`` to one document.

        ``change`` receives the current document and returns the fields to
        write. Returns the updated document, or None if it does not exist.
        """
        _check_columns(table, ())
        with get_db(self.db_path) as conn:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                f"SELECT * FROM {table} WHERE id = ?", (doc_id,)
            ).fetchone()
            if not row:
                conn.rollback()
                return None
            updates = change(row_to_doc(table, row)) or {}
            _check_columns(table, updates)
            if updates:
                data = encode_fields(table, updates)
                assignments = ", ".join(f"{k} = ?" for k in data)
                try:
                    conn.execute(
                        f"UPDATE {table} SET {assignments} WHERE id = ?",
                        [*data.values(), doc_id],
                    )
                except sqlite3.IntegrityError as e:
                    conn.rollback()
                    raise ConflictError(str(e)) from e
            conn.commit()
        return self.get(table, doc_id)

    def update(self, table: str, doc_id, **fields) -> Optional[dict]:
        return self.modify(table, doc_id, lambda _doc: fields)

    def push(self, table: str, doc_id, field: str, ref,
             front: bool = False) -> Optional[dict]:
        """Append (or prepend) ``ref`` to a list field."""
        def change(doc):
            values = list(doc[field])
            if front:
                values.insert(0, ref)
            else:
                values.append(ref)
            return {field: values}
        return self.modify(table, doc_id, change)

    def clear(self) -> None:
        """Delete every record. Used by tests."""
        with get_db(self.db_path) as conn:
            for table in COLUMNS:
                conn.execute(f"DELETE FROM {table}")
            conn.commit()


def get_repository(request: Request) -> Repository:
    return request.app.state.repository
