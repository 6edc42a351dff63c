# common/row_filters.py
"""
Client-side filtering and column projection for fetched table rows.

Everything here is pure: it takes the full row set and returns a new list,
never touching the rows themselves.
"""

from config import CATEGORY_FIELD, TITLE_FIELD, YEAR_FIELD


def title_matches(row: dict, query: str) -> bool:
    """Case-insensitive substring match on the row's title. Rows without a title never match."""
    title = row.get(TITLE_FIELD)
    if not title:
        return False
    return query.lower() in str(title).lower()


def filter_rows(rows, resource_type="", year="", title_query=""):
    """
    Return the rows matching every non-empty filter, in their original order.

    - resource_type: exact match on `resource_type`
    - year: exact match on `year`
    - title_query: case-insensitive substring match on `title`
    """
    filtered = list(rows)

    if resource_type:
        filtered = [row for row in filtered if row.get(CATEGORY_FIELD) == resource_type]

    if year:
        filtered = [row for row in filtered if row.get(YEAR_FIELD) == year]

    if title_query:
        filtered = [row for row in filtered if title_matches(row, title_query)]

    return filtered


def search_rows(rows, query: str):
    """Title-only search used by the edit view. A blank query returns everything."""
    if not query or not query.strip():
        return list(rows)
    return [row for row in rows if title_matches(row, query)]


def visible_columns(rows, hidden=()):
    """Column names of the first row, minus `hidden`. Empty when there are no rows."""
    if not rows:
        return []
    return [column for column in rows[0].keys() if column not in hidden]


def project_row(row: dict, hidden=()) -> dict:
    """Copy of `row` without the `hidden` columns."""
    return {column: value for column, value in row.items() if column not in hidden}
