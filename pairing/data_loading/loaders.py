"""
Data loading functions for opposition pairing.

This module loads users from CSV or JSON files and question texts from YAML.
Users are validated on construction (see entities.User).
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import yaml

from ..entities import User

logger = logging.getLogger(__name__)


def load_users(
    filepath: str,
    file_format: Optional[str] = None,
    delimiter: str = ",",
    id_column: str = "id",
    opinion_prefix: str = "q"
) -> List[User]:
    """
    Load users from a CSV or JSON file.

    CSV files need an id column and one column per question named
    `<opinion_prefix><number>` (q1, q2, ...). JSON files hold a list of
    {"id": ..., "opinions": [...]} objects.

    Args:
        filepath: Path to the users file
        file_format: "csv" or "json" (default: inferred from the extension)
        delimiter: Field delimiter for CSV files
        id_column: Name of the id column in CSV files
        opinion_prefix: Prefix of opinion columns in CSV files

    Returns:
        List of User objects in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or contains invalid rows
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Users file not found: {filepath}")

    fmt = file_format or ("json" if path.suffix.lower() == ".json" else "csv")

    if fmt == "json":
        users = _load_users_json(path)
    elif fmt == "csv":
        logger.info(f"Loading users from {filepath} (delimiter: {repr(delimiter)})")
        df = pd.read_csv(path, sep=delimiter)
        if df.empty:
            raise ValueError(f"Users file is empty: {filepath}")
        users = users_from_dataframe(df, id_column=id_column, opinion_prefix=opinion_prefix)
    else:
        raise ValueError(f"Unsupported users file format: {fmt}")

    _warn_on_duplicate_ids(users)
    logger.info(f"Loaded {len(users)} users")
    return users


def _load_users_json(path: Path) -> List[User]:
    logger.info(f"Loading users from {path}")
    with open(path, "r") as f:
        records = json.load(f)

    if not isinstance(records, list):
        raise ValueError(f"Users JSON must contain a list, got {type(records).__name__}")
    if not records:
        raise ValueError(f"Users file is empty: {path}")

    users = []
    for idx, record in enumerate(records):
        if not isinstance(record, dict):
            raise ValueError(f"Invalid user record {idx}: expected an object, got {type(record).__name__}")
        if "opinions" not in record:
            raise ValueError(f"Invalid user record {idx}: missing 'opinions'")
        users.append(User.from_dict(record))
    return users


def get_opinion_columns(df: pd.DataFrame, opinion_prefix: str = "q") -> List[str]:
    """
    Find opinion columns and order them by their numeric suffix.

    Args:
        df: Users DataFrame
        opinion_prefix: Column prefix (e.g. "q" for q1, q2, ..., q10)

    Returns:
        Column names sorted by question number
    """
    pattern = re.compile(rf"^{re.escape(opinion_prefix)}(\d+)$")
    numbered = []
    for column in df.columns:
        match = pattern.match(str(column))
        if match:
            numbered.append((int(match.group(1)), column))
    return [column for _, column in sorted(numbered)]


def users_from_dataframe(
    df: pd.DataFrame,
    id_column: str = "id",
    opinion_prefix: str = "q"
) -> List[User]:
    """
    Convert a DataFrame with one row per user into User objects.

    Args:
        df: DataFrame with an id column and opinion columns
        id_column: Name of the id column (ids are generated if absent)
        opinion_prefix: Prefix of opinion columns

    Returns:
        List of User objects in row order

    Raises:
        ValueError: If no opinion columns exist or a row has missing answers
    """
    opinion_columns = get_opinion_columns(df, opinion_prefix)
    if not opinion_columns:
        raise ValueError(f"No opinion columns with prefix '{opinion_prefix}' found")

    opinions = df[opinion_columns]
    missing_rows = opinions.index[opinions.isna().any(axis=1)].tolist()
    if missing_rows:
        raise ValueError(f"Rows with missing opinion values: {missing_rows[:10]}")

    try:
        opinions = opinions.apply(pd.to_numeric)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Opinion values must be numeric: {e}") from e

    if ((opinions % 1) != 0).any().any():
        raise ValueError("Opinion values must be whole numbers")

    opinions = opinions.astype(int)

    if id_column in df.columns:
        ids = df[id_column].astype(str).tolist()
    else:
        logger.warning(f"No '{id_column}' column found, generating user ids")
        ids = [None] * len(df)

    logger.debug(f"Using {len(opinion_columns)} opinion columns: {opinion_columns}")

    return [
        User.create(row, user_id=user_id)
        for user_id, row in zip(ids, opinions.itertuples(index=False, name=None))
    ]


def _warn_on_duplicate_ids(users: List[User]) -> None:
    counts = pd.Series([user.id for user in users]).value_counts()
    duplicates = counts[counts > 1]
    if not duplicates.empty:
        logger.warning(f"Duplicate user ids found: {duplicates.index.tolist()[:10]}")


def load_questions(filepath: str) -> List[str]:
    """
    Load question texts from YAML.

    The file holds a `questions` list in opinion-vector order.

    Args:
        filepath: Path to the questions YAML file

    Returns:
        List of question texts

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the questions list is missing or malformed
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Questions file not found: {filepath}")

    logger.info(f"Loading questions from {filepath}")
    with open(filepath, "r") as f:
        data: Dict[str, Any] = yaml.safe_load(f) or {}

    questions = data.get("questions")
    if not isinstance(questions, list) or not all(isinstance(q, str) for q in questions):
        raise ValueError(f"Questions file must contain a list of strings under 'questions': {filepath}")

    logger.info(f"Loaded {len(questions)} questions")
    return questions


def save_users(users: List[User], filepath: str, opinion_prefix: str = "q") -> None:
    """
    Write users to CSV in the layout read by `load_users`.

    Raises:
        ValueError: If there are no users or their opinion vectors differ in length
    """
    if not users:
        raise ValueError("No users to save")
    lengths = sorted({len(user.opinions) for user in users})
    if len(lengths) > 1:
        raise ValueError(f"All users must answer the same number of questions, got lengths {lengths}")

    rows = []
    for user in users:
        row = {"id": user.id}
        for idx, value in enumerate(user.opinions):
            row[f"{opinion_prefix}{idx + 1}"] = value
        rows.append(row)
    pd.DataFrame(rows).to_csv(filepath, index=False)
    logger.info(f"Saved {len(users)} users to {filepath}")
