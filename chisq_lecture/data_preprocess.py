import numpy as np
import pandas as pd

# Butterfly colours observed in the meadow survey (goodness-of-fit example)
BUTTERFLY_COUNTS = {"Blue": 48, "Orange": 62, "Yellow": 56, "White": 34}

# Deer age group x preferred vegetation (independence example)
DEER_AGE_GROUPS = ["Fawn", "Yearling", "Adult"]
DEER_VEGETATION = ["Grasses", "Shrubs", "Forbs"]
DEER_COUNTS = [
    [18, 12, 20],
    [15, 22, 13],
    [27, 30, 23],
]

# Butterfly colours counted separately in three meadows (homogeneity example)
MEADOWS = ["North", "South", "East"]
MEADOW_COUNTS = [
    [30, 22, 28, 20],
    [25, 35, 20, 20],
    [18, 27, 31, 24],
]


def butterfly_colors():
    """4-category frequency table with a uniform null (expected count 50 per colour)."""
    categories = list(BUTTERFLY_COUNTS)
    return pd.DataFrame({
        'category': categories,
        'observed': [BUTTERFLY_COUNTS[c] for c in categories],
        'expected_prob': [1 / len(categories)] * len(categories),
    })


def deer_vegetation():
    """3x3 contingency table of deer age group against vegetation preference."""
    return pd.DataFrame(
        DEER_COUNTS,
        index=pd.Index(DEER_AGE_GROUPS, name='age_group'),
        columns=pd.Index(DEER_VEGETATION, name='vegetation'),
    )


def meadow_butterflies():
    """Colour counts for three pre-defined meadows; rows are the subgroups."""
    return pd.DataFrame(
        MEADOW_COUNTS,
        index=pd.Index(MEADOWS, name='meadow'),
        columns=pd.Index(list(BUTTERFLY_COUNTS), name='color'),
    )


def _check_counts(values, what):
    values = np.asarray(values, dtype=float)
    if np.isnan(values).any():
        raise ValueError(f"{what} contain missing values")
    if (values < 0).any():
        raise ValueError(f"{what} must be non-negative")
    if not np.all(np.mod(values, 1) == 0):
        raise ValueError(f"{what} must be whole numbers")
    if values.sum() == 0:
        raise ValueError(f"{what} sum to zero")
    return values.astype(int)


def validate_frequency_table(df):
    """
    Checks a one-way frequency table and returns a cleaned copy.
    - Requires 'category' and 'observed' columns and at least two categories.
    - 'expected_prob', when present, must be non-negative and sum to 1.
    """
    missing = {'category', 'observed'} - set(df.columns)
    if missing:
        raise ValueError(f"Frequency table is missing columns: {sorted(missing)}")
    if len(df) < 2:
        raise ValueError("A goodness-of-fit test needs at least two categories")
    if df['category'].duplicated().any():
        raise ValueError("Category labels must be unique")

    cleaned = df.copy()
    cleaned['category'] = cleaned['category'].astype(str)
    cleaned['observed'] = _check_counts(
        pd.to_numeric(cleaned['observed'], errors='coerce'), "Observed counts")

    if 'expected_prob' in cleaned.columns:
        probs = pd.to_numeric(cleaned['expected_prob'], errors='coerce').to_numpy(dtype=float)
        if np.isnan(probs).any():
            raise ValueError("Expected probabilities contain missing values")
        if (probs < 0).any():
            raise ValueError("Expected probabilities must be non-negative")
        if abs(probs.sum() - 1.0) > 1e-6:
            raise ValueError(f"Expected probabilities must sum to 1 (got {probs.sum():.6f})")
        cleaned['expected_prob'] = probs
    return cleaned.reset_index(drop=True)


def validate_contingency_table(table):
    """Checks a two-way table of counts and returns an integer copy."""
    if table.shape[0] < 2 or table.shape[1] < 2:
        raise ValueError(f"A contingency table needs at least 2 rows and 2 columns, got {table.shape}")
    numeric = table.apply(pd.to_numeric, errors='coerce')
    counts = _check_counts(numeric.to_numpy(), "Table counts")
    if (counts.sum(axis=1) == 0).any() or (counts.sum(axis=0) == 0).any():
        raise ValueError("Every row and column of the table must contain at least one observation")
    return pd.DataFrame(counts, index=table.index, columns=table.columns)


def load_frequency_table(path):
    """Reads a CSV with columns category, observed and optionally expected_prob."""
    df = pd.read_csv(path)
    df.columns = [str(c).strip().lower() for c in df.columns]
    return validate_frequency_table(df)


def load_contingency_table(path):
    """Reads a CSV whose first column holds the row labels and the rest hold counts."""
    table = pd.read_csv(path, index_col=0)
    table.index.name = table.index.name or 'row'
    table.columns.name = table.columns.name or 'column'
    return validate_contingency_table(table)


def crosstab_records(df, row_col, col_col):
    """Builds a contingency table from raw records, one row per observation."""
    for col in (row_col, col_col):
        if col not in df.columns:
            raise ValueError(f"Column '{col}' not found in records")
    records = df[[row_col, col_col]].dropna()
    table = pd.crosstab(records[row_col], records[col_col])
    return validate_contingency_table(table)
