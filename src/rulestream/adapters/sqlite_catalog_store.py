"""SQLite-backed catalog store for rules, product groups and recommendations."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import TypeVar

from ..domain.catalog import CatalogRecord, ProductGroup, Recommendation, Rule

_RecordT = TypeVar("_RecordT", bound=CatalogRecord)

_TABLES = ("rules", "product_groups", "recommendations")


class SqliteCatalogStore:
    """Stores catalog records as JSON documents keyed by identifier.

    Each table keeps a ``position`` column so list order is insertion
    order; updating a record keeps its position.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._ensure_parent_dir()
        self._init_schema()

    def _ensure_parent_dir(self) -> None:
        path = Path(self._db_path)
        if path.parent.exists():
            return
        path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            for table in _TABLES:
                conn.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {table} (
                        position INTEGER PRIMARY KEY AUTOINCREMENT,
                        record_id TEXT NOT NULL UNIQUE,
                        document TEXT NOT NULL
                    )
                    """
                )

    # --- generic helpers ---

    def _list(self, table: str, model: type[_RecordT]) -> list[_RecordT]:
        with self._connect() as conn:
            rows = conn.execute(f"SELECT document FROM {table} ORDER BY position").fetchall()
        return [model.model_validate(json.loads(row["document"])) for row in rows]

    def _get(self, table: str, model: type[_RecordT], record_id: str) -> _RecordT | None:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT document FROM {table} WHERE record_id = ?", (record_id,)
            ).fetchone()
        if row is None:
            return None
        return model.model_validate(json.loads(row["document"]))

    def _upsert(self, table: str, record_id: str, record: CatalogRecord) -> None:
        document = json.dumps(record.to_document())
        with self._connect() as conn:
            conn.execute(
                f"""
                INSERT INTO {table} (record_id, document) VALUES (?, ?)
                ON CONFLICT(record_id) DO UPDATE SET document = excluded.document
                """,
                (record_id, document),
            )

    def _delete(self, table: str, record_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(f"DELETE FROM {table} WHERE record_id = ?", (record_id,))
        return cursor.rowcount > 0

    # --- rules ---

    def list_rules(self) -> list[Rule]:
        return self._list("rules", Rule)

    def get_rule(self, rule_id: str) -> Rule | None:
        return self._get("rules", Rule, rule_id)

    def upsert_rule(self, rule: Rule) -> None:
        self._upsert("rules", rule.id, rule)

    def delete_rule(self, rule_id: str) -> bool:
        return self._delete("rules", rule_id)

    # --- product groups ---

    def list_product_groups(self) -> list[ProductGroup]:
        return self._list("product_groups", ProductGroup)

    def get_product_group(self, group_id: str) -> ProductGroup | None:
        return self._get("product_groups", ProductGroup, group_id)

    def upsert_product_group(self, group: ProductGroup) -> None:
        self._upsert("product_groups", group.id, group)

    def delete_product_group(self, group_id: str) -> bool:
        return self._delete("product_groups", group_id)

    # --- recommendations ---

    def list_recommendations(self) -> list[Recommendation]:
        return self._list("recommendations", Recommendation)

    def get_recommendation(self, recommendation_id: str) -> Recommendation | None:
        return self._get("recommendations", Recommendation, recommendation_id)

    def upsert_recommendation(self, recommendation: Recommendation) -> None:
        self._upsert("recommendations", recommendation.id, recommendation)

    def delete_recommendation(self, recommendation_id: str) -> bool:
        return self._delete("recommendations", recommendation_id)

    def clear_default_recommendation(self, keep_id: str | None = None) -> int:
        """Unset ``is_default`` on every recommendation except ``keep_id``. Returns count changed."""
        changed = 0
        for recommendation in self.list_recommendations():
            if recommendation.id == keep_id or not recommendation.is_default:
                continue
            self.upsert_recommendation(recommendation.model_copy(update={"is_default": False}))
            changed += 1
        return changed
