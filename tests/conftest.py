"""Shared fixtures for subscription KNN tests."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pytest

from subscription_knn.data_pipeline import clean_data


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def raw_players():
    """Synthetic source table shaped like the players CSV."""
    rng = np.random.default_rng(0)
    n = 60

    return pd.DataFrame({
        "hashedEmail": [f"{i:08x}" for i in range(n)],
        "age": rng.integers(9, 46, size=n),
        "gender": rng.choice(["Male", "Female", "Non-binary"], size=n),
        "subscribed": rng.choice(["TRUE", "FALSE"], size=n, p=[0.7, 0.3]),
        "experience": rng.choice(["Amateur", "Regular", "Pro", "Veteran"], size=n),
        "playedHours": np.round(rng.exponential(6.0, size=n), 1),
        "name": [f"Player{i}" for i in range(n)],
    })


@pytest.fixture
def players_csv(tmp_path, raw_players):
    path = tmp_path / "players.csv"
    raw_players.to_csv(path, index=False)
    return path


@pytest.fixture
def cleaned_players(raw_players):
    return clean_data(raw_players)


def make_cluster_frame(n_per_cluster):
    """Two well-separated clusters: young casual players who don't subscribe,
    older heavy players who do."""
    young = pd.DataFrame({
        "age": [15.0 + 0.1 * i for i in range(n_per_cluster)],
        "playedHours": [0.5 + 0.05 * i for i in range(n_per_cluster)],
        "subscribed": [False] * n_per_cluster,
    })
    older = pd.DataFrame({
        "age": [30.0 + 0.1 * i for i in range(n_per_cluster)],
        "playedHours": [16.0 + 0.05 * i for i in range(n_per_cluster)],
        "subscribed": [True] * n_per_cluster,
    })
    df = pd.concat([young, older], ignore_index=True)
    df["subscribed"] = pd.Categorical(df["subscribed"], categories=[False, True])
    return df


@pytest.fixture
def cluster_dataset():
    """20 records in two clusters of 10."""
    return make_cluster_frame(10)


@pytest.fixture
def cluster_train_test(cluster_dataset):
    """Hand-made split: even rows train, odd rows test, five of each label."""
    train_df = cluster_dataset.iloc[::2]
    test_df = cluster_dataset.iloc[1::2]
    return train_df, test_df
