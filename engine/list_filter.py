"""Filter pipeline shared by every searchable list view.

exact dropdown filters -> (query) score, drop non-matches, sort by score
                       -> (no query) sort by the view's default column
"""

from typing import Dict, List, Optional, Sequence

import pandas as pd

from config.defaults import NO_MATCH, RECORD_SEARCH_COLUMNS, RECORD_SEARCH_FIELDS
from engine.relevance import best_score, rank
from models.record import Record

SCORE_COLUMN = "_score"


def apply_exact_filters(df: pd.DataFrame, filters: Optional[Dict[str, Optional[str]]]) -> pd.DataFrame:
    """Keep rows equal to each filter value; None, "" and "All" mean no filter."""
    if not filters:
        return df
    mask = pd.Series(True, index=df.index)
    for column, value in filters.items():
        if value in (None, "", "All") or column not in df.columns:
            continue
        mask &= df[column].astype(str).str.lower() == str(value).lower()
    return df[mask]


def filter_frame(
    df: pd.DataFrame,
    query: Optional[str],
    search_columns: Sequence[str],
    sort_by: str,
    ascending: bool = True,
    filters: Optional[Dict[str, Optional[str]]] = None,
) -> pd.DataFrame:
    """Run the list-view pipeline over a DataFrame and return the visible rows in order."""
    result = apply_exact_filters(df, filters)
    result = result.sort_values(sort_by, ascending=ascending, kind="mergesort")

    if not (query or "").strip() or result.empty:
        return result.reset_index(drop=True)

    columns = [c for c in search_columns if c in result.columns]
    if not columns:
        return result.iloc[0:0].reset_index(drop=True)
    scores = result[columns].apply(lambda row: best_score(query, row.tolist()), axis=1)
    result = result.assign(**{SCORE_COLUMN: scores})
    result = result[result[SCORE_COLUMN] > NO_MATCH]
    result = result.sort_values(SCORE_COLUMN, ascending=False, kind="mergesort")
    return result.drop(columns=SCORE_COLUMN).reset_index(drop=True)


def search_records(
    records: Sequence[Record],
    query: Optional[str],
    entity_type: Optional[str] = None,
    fields: Sequence[str] = tuple(RECORD_SEARCH_FIELDS),
) -> List[Record]:
    """Records matching the type filter, ranked by query relevance (default: by name)."""
    candidates = [
        r for r in records
        if entity_type in (None, "", "All") or r.entity_type == entity_type
    ]
    return rank(
        candidates,
        query,
        fields=lambda r: [getattr(r, f, None) for f in fields],
        default_key=lambda r: r.name.lower(),
    )


def records_to_frame(records: Sequence[Record]) -> pd.DataFrame:
    rows = [{
        "ID": r.record_id,
        "Type": r.entity_type,
        "Name": r.name,
        "Email": r.email,
        "Phone": r.phone,
        "Notes": r.notes,
        "Created": r.created_at.strftime("%Y-%m-%d"),
    } for r in records]
    return pd.DataFrame(rows, columns=["ID", "Type", "Name", "Email", "Phone", "Notes", "Created"])


def filter_records_frame(
    records: Sequence[Record],
    query: Optional[str],
    entity_type: Optional[str] = None,
) -> pd.DataFrame:
    """The Records table: exact Type filter, then search ranking or sort by name."""
    return filter_frame(
        records_to_frame(records),
        query,
        RECORD_SEARCH_COLUMNS,
        sort_by="Name",
        filters={"Type": entity_type},
    )
