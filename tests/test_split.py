"""
Unit tests for the seeded train/test split.
"""

import pandas as pd
import pytest

from subscription_knn.exceptions import EmptyDatasetError
from subscription_knn.utils import create_train_test_split, train_size_for


@pytest.mark.parametrize("n_records, expected", [
    (20, 15),
    (10, 8),
    (7, 5),
    (4, 3),
    (2, 2),
])
def test_train_size_rounds_to_nearest_record(n_records, expected):
    """Test the training size is the fraction rounded half up."""
    assert train_size_for(n_records, 0.75) == expected


def test_split_sizes(cleaned_players):
    """Test partition sizes add up to the cleaned dataset."""
    train_df, test_df = create_train_test_split(cleaned_players, 0.75, seed=123)

    assert len(train_df) + len(test_df) == len(cleaned_players)
    assert len(train_df) == train_size_for(len(cleaned_players), 0.75)


def test_split_is_deterministic(cleaned_players):
    """Test the same seed gives an identical partition on every call."""
    train_a, test_a = create_train_test_split(cleaned_players, 0.75, seed=123)
    train_b, test_b = create_train_test_split(cleaned_players, 0.75, seed=123)

    pd.testing.assert_frame_equal(train_a, train_b)
    pd.testing.assert_frame_equal(test_a, test_b)


def test_split_is_disjoint_partition(cleaned_players):
    """Test train and test share no record and together recover the dataset."""
    train_df, test_df = create_train_test_split(cleaned_players, 0.75, seed=123)

    train_ids = set(train_df.index)
    test_ids = set(test_df.index)

    assert train_ids.isdisjoint(test_ids)
    assert train_ids | test_ids == set(cleaned_players.index)

    recombined = pd.concat([train_df, test_df]).sort_index()
    pd.testing.assert_frame_equal(recombined, cleaned_players)


def test_split_does_not_mutate_input(cleaned_players):
    """Test splitting leaves the dataset untouched."""
    before = cleaned_players.copy()
    create_train_test_split(cleaned_players, 0.75, seed=123)
    pd.testing.assert_frame_equal(cleaned_players, before)


def test_split_single_record_has_empty_test_set(cluster_dataset):
    """Test a split that rounds to every record leaves an empty test set."""
    one = cluster_dataset.iloc[:1]

    train_df, test_df = create_train_test_split(one, 0.75, seed=123)

    assert len(train_df) == 1
    assert len(test_df) == 0
    assert list(test_df.columns) == list(one.columns)


def test_split_without_training_records_raises(cluster_dataset):
    """Test a split that rounds to zero training records raises."""
    one = cluster_dataset.iloc[:1]

    with pytest.raises(EmptyDatasetError):
        create_train_test_split(one, 0.25, seed=123)
